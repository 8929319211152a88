"""Resolve the expected version of every tracked package.

Pinned entries are used as-is. Bare names are looked up through the injected
``query_latest`` collaborator; all lookups run concurrently and the map is
built only after every one of them has settled. A failing entry never aborts
the batch, it simply contributes nothing.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from .errors import InvalidTrackedEntry, VersionLookupError
from .events import Event, EventSink, null_sink
from .lookups import QueryLatest
from .models.tracked_package import Resolution, TrackedPackage

_SOURCE = "resolver"


async def _resolve_one(
    raw: Any,
    query_latest: QueryLatest,
    timeout: float | None,
) -> Resolution:
    try:
        tracked = TrackedPackage.from_raw(raw)
    except InvalidTrackedEntry as exc:
        return Resolution.failed(None, str(exc))

    if tracked.is_pinned:
        return Resolution.resolved(tracked.name, tracked.pinned_version)

    try:
        if timeout is None:
            output = await query_latest(tracked.name)
        else:
            output = await asyncio.wait_for(query_latest(tracked.name), timeout=timeout)
        version = str(output).rstrip("\r\n")
        if not version:
            raise VersionLookupError(f"Empty version returned for '{tracked.name}'")
    except asyncio.TimeoutError:
        return Resolution.failed(tracked.name, f"Lookup for '{tracked.name}' timed out")
    except Exception as exc:  # lookup collaborators may raise anything
        return Resolution.failed(tracked.name, str(exc))

    return Resolution.resolved(tracked.name, version)


async def resolve_entries(
    tracked: Iterable[Any],
    query_latest: QueryLatest,
    debug: bool = False,
    emit: EventSink = null_sink,
    timeout: float | None = None,
) -> list[Resolution]:
    """Resolve each raw tracked entry, returning results in input order."""
    results = await asyncio.gather(
        *(_resolve_one(raw, query_latest, timeout) for raw in tracked)
    )
    if debug:
        for result in results:
            if not result.contributes:
                emit(
                    Event(
                        "debug",
                        _SOURCE,
                        f"skipping {result.name or 'invalid entry'}: {result.error}",
                    )
                )
    return list(results)


def aggregate(resolutions: Iterable[Resolution]) -> Mapping[str, str]:
    """Fold contributing resolutions into a read-only name -> version map."""
    version_map: dict[str, str] = {}
    for resolution in resolutions:
        if resolution.contributes:
            version_map[resolution.name] = resolution.version
    return MappingProxyType(version_map)


async def resolve(
    tracked: Iterable[Any],
    query_latest: QueryLatest,
    debug: bool = False,
    emit: EventSink = null_sink,
    timeout: float | None = None,
) -> Mapping[str, str]:
    """Build the expected version map for ``tracked``."""
    resolutions = await resolve_entries(
        tracked, query_latest, debug=debug, emit=emit, timeout=timeout
    )
    version_map = aggregate(resolutions)
    if debug:
        emit(Event("debug", _SOURCE, "expected versions", dict(version_map)))
    return version_map
