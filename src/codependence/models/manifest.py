"""Parsed package manifest bound to the file it was read from."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .update_candidate import SECTIONS


@dataclass(frozen=True)
class Manifest:
    """A ``package.json`` document and its location.

    The path is kept beside the parsed ``data`` rather than inside it, so it
    never reaches the serialized output.
    """

    path: Path
    data: Mapping[str, Any]

    @property
    def name(self) -> str:
        name = self.data.get("name")
        return str(name) if name is not None else str(self.path)

    def section(self, key: str) -> Mapping[str, Any] | None:
        if key not in SECTIONS:
            raise KeyError(f"Unknown dependency section: {key}")
        value = self.data.get(key)
        return value if isinstance(value, Mapping) else None

    def replace_sections(self, sections: Mapping[str, Mapping[str, Any] | None]) -> Manifest:
        """Return a copy with the given sections replaced.

        A ``None`` value leaves that section as it was. Top-level key order
        is kept; sections that did not exist before are appended.
        """
        data = dict(self.data)
        for key, value in sections.items():
            if key not in SECTIONS:
                raise KeyError(f"Unknown dependency section: {key}")
            if value is not None:
                data[key] = dict(value)
        return Manifest(path=self.path, data=data)
