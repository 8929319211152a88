"""Compute out-of-date entries in a manifest and patch them."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from .events import Event, EventSink, null_sink
from .models.manifest import Manifest
from .models.update_candidate import SECTIONS, CandidateLists, UpdateCandidate
from .parsers.version_spec import parse as parse_version


def diff(
    section: Mapping[str, Any] | None,
    expected: Mapping[str, str],
) -> list[UpdateCandidate]:
    """Return tracked entries of ``section`` whose bare version is not ``expected``.

    The result follows the section's own key order.
    """
    if not section:
        return []

    candidates: list[UpdateCandidate] = []
    for name, declared in section.items():
        if name not in expected:
            continue
        actual = str(declared)
        spec = parse_version(actual)
        if spec.bare_version == expected[name]:
            continue
        candidates.append(
            UpdateCandidate(
                name=name,
                actual=actual,
                exact=spec.bare_version,
                expected=expected[name],
            )
        )
    return candidates


def diff_manifest(manifest: Manifest, expected: Mapping[str, str]) -> CandidateLists:
    """Diff the three dependency sections of ``manifest``."""
    dependencies, dev_dependencies, peer_dependencies = (
        tuple(diff(manifest.section(key), expected)) for key in SECTIONS
    )
    return CandidateLists(
        dependencies=dependencies,
        dev_dependencies=dev_dependencies,
        peer_dependencies=peer_dependencies,
    )


def _patch_section(
    section: Mapping[str, Any] | None,
    candidates: Sequence[UpdateCandidate],
) -> dict[str, Any] | None:
    if not candidates:
        return None
    patched = dict(section or {})
    for candidate in candidates:
        patched[candidate.name] = candidate.expected
    return patched


def patch(
    manifest: Manifest,
    candidate_lists: CandidateLists,
    debug: bool = False,
    emit: EventSink = null_sink,
) -> Manifest:
    """Return a copy of ``manifest`` with every candidate set to its expected version.

    Sections without candidates are carried through untouched, and sections
    the manifest never had stay absent.
    """
    sections = {
        key: _patch_section(manifest.section(key), candidates)
        for key, candidates in candidate_lists.by_section().items()
    }
    if debug:
        emit(
            Event(
                "debug",
                "patch",
                f"computed sections for {manifest.name}",
                {key: value for key, value in sections.items() if value is not None},
            )
        )
    return manifest.replace_sections(sections)
