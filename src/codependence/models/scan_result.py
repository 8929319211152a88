"""Aggregate outcome of a single scan."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class ScanResult:
    """Outcome across every manifest matched by one orchestrator run."""

    manifests_checked: int
    manifests_needing_update: tuple[Path, ...] = field(default_factory=tuple)
    updated: bool = False
    written: tuple[Path, ...] = field(default_factory=tuple)
    is_cli: bool = False

    def __post_init__(self) -> None:
        if self.manifests_checked < 0:
            raise ValueError("manifests_checked must be non-negative")
        if len(self.manifests_needing_update) > self.manifests_checked:
            raise ValueError("More manifests need updating than were checked")

    @property
    def needs_update(self) -> bool:
        return bool(self.manifests_needing_update)

    @property
    def failed(self) -> bool:
        return self.needs_update and not self.updated

    @property
    def exit_code(self) -> int:
        return 1 if self.failed and self.is_cli else 0

    def to_dict(self) -> dict[str, object]:
        return {
            "manifestsChecked": self.manifests_checked,
            "manifestsNeedingUpdate": [str(p) for p in self.manifests_needing_update],
            "updated": self.updated,
            "written": [str(p) for p in self.written],
            "failed": self.failed,
        }
