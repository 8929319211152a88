"""Tracked package descriptor and per-entry resolution result."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..errors import InvalidTrackedEntry


@dataclass(frozen=True)
class TrackedPackage:
    """A codependency whose version is audited across manifests.

    ``pinned_version`` is ``None`` when the latest published version must be
    looked up externally.
    """

    name: str
    pinned_version: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise InvalidTrackedEntry("Tracked package name must be non-empty")
        if self.pinned_version is not None and not self.pinned_version:
            raise InvalidTrackedEntry(f"Pinned version for '{self.name}' must be non-empty")

    @property
    def is_pinned(self) -> bool:
        return self.pinned_version is not None

    @classmethod
    def from_raw(cls, raw: Any) -> TrackedPackage:
        """Build a descriptor from a bare name or a single-key ``{name: version}`` mapping."""
        if isinstance(raw, str):
            return cls(name=raw)
        if isinstance(raw, dict):
            if len(raw) != 1:
                raise InvalidTrackedEntry(
                    f"Pinned codependency must have exactly one key, got {len(raw)}"
                )
            [(name, version)] = raw.items()
            if version is None:
                raise InvalidTrackedEntry(f"Pinned version for '{name}' must be non-empty")
            return cls(name=str(name), pinned_version=str(version))
        raise InvalidTrackedEntry(f"Unsupported codependency entry: {raw!r}")


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one tracked entry.

    A resolution without a version contributes nothing to the expected
    version map; ``error`` then says why.
    """

    name: str | None
    version: str | None = None
    error: str | None = None

    @property
    def contributes(self) -> bool:
        return bool(self.name) and bool(self.version)

    @classmethod
    def resolved(cls, name: str, version: str) -> Resolution:
        return cls(name=name, version=version)

    @classmethod
    def failed(cls, name: str | None, error: str) -> Resolution:
        return cls(name=name, error=error)
