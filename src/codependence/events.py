"""Structured notification channel used by the scanning core.

Core components never print. They receive an ``emit`` callable and hand it
``Event`` values; the CLI decides how those are rendered.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

LOGGER = logging.getLogger("codependence")

_VALID_LEVELS = {"debug", "info", "warning", "error"}


@dataclass(frozen=True)
class Event:
    """A single notification emitted by a component."""

    level: str
    source: str
    message: str
    details: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        if self.level not in _VALID_LEVELS:
            raise ValueError(f"Invalid event level: {self.level}")


EventSink: TypeAlias = Callable[[Event], None]


def null_sink(event: Event) -> None:
    """Drop ``event``."""


@dataclass
class EventRecorder:
    """Sink that keeps every event it receives."""

    events: list[Event] = field(default_factory=list)

    def __call__(self, event: Event) -> None:
        self.events.append(event)

    def messages(self, level: str | None = None) -> list[str]:
        return [e.message for e in self.events if level is None or e.level == level]


def logging_sink(logger: logging.Logger = LOGGER) -> EventSink:
    """Return a sink forwarding events to ``logger`` at the matching level."""

    def _sink(event: Event) -> None:
        numeric_level = getattr(logging, event.level.upper())
        if event.details:
            logger.log(numeric_level, "%s: %s %s", event.source, event.message, dict(event.details))
        else:
            logger.log(numeric_level, "%s: %s", event.source, event.message)

    return _sink


def setup_logging(level: str = "INFO", logger: logging.Logger = LOGGER) -> logging.Logger:
    """Attach a console handler to ``logger`` for the current execution."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.handlers.clear()
    logger.setLevel(numeric_level)
    logger.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console_handler)
    return logger
