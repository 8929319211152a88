"""Core scanning entrypoints.

This module MUST NOT print or exit: everything it has to say goes through the
``emit`` sink, and the outcome is returned as a ScanResult so the CLI (or any
other caller) decides how to render it and which exit code to use.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from pathlib import Path

from .config import Options
from .diff import diff_manifest, patch
from .discovery import expand_glob
from .errors import ConfigurationError
from .events import Event, EventSink, null_sink
from .lookups import QueryLatest, get_lookup
from .models.manifest import Manifest
from .models.scan_result import ScanResult
from .parsers import package_json
from .report import render_summary, report
from .resolver import resolve


def load_manifests(options: Options) -> list[Manifest]:
    """Expand ``options.files`` under the root directory and parse every match."""
    root = Path(options.root_dir)
    files = expand_glob(options.files, cwd=root, ignore=options.ignore)
    return [package_json.load(root / file) for file in files]


def check_manifest(
    manifest: Manifest,
    expected_versions: Mapping[str, str],
    options: Options,
    emit: EventSink = null_sink,
) -> tuple[bool, bool]:
    """Diff, report and optionally rewrite one manifest.

    Returns ``(needs_update, written)``.
    """
    candidate_lists = diff_manifest(manifest, expected_versions)
    if options.debug:
        emit(
            Event(
                "debug",
                "check",
                f"update candidates for {manifest.name}",
                candidate_lists.to_dict(),
            )
        )

    needs_update = report(manifest.name, candidate_lists, silent=options.silent, emit=emit)
    if not (needs_update and options.update):
        return needs_update, False

    updated = patch(manifest, candidate_lists, debug=options.debug, emit=emit)
    if options.is_testing:
        emit(Event("info", "check", f"testing mode, skipped writing {manifest.path}"))
        return needs_update, False

    package_json.write(updated)
    return needs_update, True


async def run_async(
    options: Options,
    query_latest: QueryLatest | None = None,
    emit: EventSink = null_sink,
) -> ScanResult:
    """Scan manifests matched by ``options`` against the codependencies' expected versions.

    Raises:
        ConfigurationError: If no codependencies are configured. Nothing is
            read from disk in that case.
        ManifestReadError / ManifestWriteError: Propagated from manifest I/O.
    """
    if not options.codependencies:
        raise ConfigurationError('"codependencies" are required')

    if query_latest is None:
        query_latest = get_lookup(options.lookup, options.registry)

    expected_versions = await resolve(
        options.codependencies,
        query_latest,
        debug=options.debug,
        emit=emit,
        timeout=options.timeout,
    )

    manifests = load_manifests(options)

    needing_update: list[Path] = []
    written: list[Path] = []
    for manifest in manifests:
        needs_update, was_written = check_manifest(manifest, expected_versions, options, emit)
        if needs_update:
            needing_update.append(manifest.path)
        if was_written:
            written.append(manifest.path)

    result = ScanResult(
        manifests_checked=len(manifests),
        manifests_needing_update=tuple(needing_update),
        updated=options.update,
        written=tuple(written),
        is_cli=options.is_cli,
    )
    if options.debug:
        emit(Event("debug", "scan", "scan finished", result.to_dict()))
    emit(render_summary(result))
    return result


def run(
    options: Options,
    query_latest: QueryLatest | None = None,
    emit: EventSink = null_sink,
) -> ScanResult:
    """Synchronous wrapper around :func:`run_async`."""
    return asyncio.run(run_async(options, query_latest=query_latest, emit=emit))
