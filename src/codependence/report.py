"""Mismatch reporting and final scan notices."""

from __future__ import annotations

from .events import Event, EventSink, null_sink
from .models.scan_result import ScanResult
from .models.update_candidate import CandidateLists


def report(
    manifest_name: str,
    candidate_lists: CandidateLists,
    silent: bool = False,
    emit: EventSink = null_sink,
) -> bool:
    """Emit one warning per update candidate and return whether any exist."""
    if not silent:
        for candidates in candidate_lists.by_section().values():
            for c in candidates:
                emit(
                    Event(
                        "warning",
                        manifest_name,
                        f"{c.name} version is not correct. "
                        f"Found {c.actual} and should be {c.expected}",
                        c.to_dict(),
                    )
                )
    return candidate_lists.has_updates


def render_summary(result: ScanResult) -> Event:
    """Return the closing notice for a finished scan."""
    if result.failed:
        count = len(result.manifests_needing_update)
        return Event(
            "error",
            "codependence",
            f"dependencies are not correct in {count} of {result.manifests_checked} manifest(s)",
            result.to_dict(),
        )
    if result.needs_update:
        return Event(
            "info",
            "codependence",
            "dependencies were not correct but should be updated! Check your git status.",
            result.to_dict(),
        )
    return Event("info", "codependence", "no dependency issues found!")
