"""Expand manifest glob patterns under a root directory."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pathspec

from .errors import ConfigurationError

DEFAULT_FILES = ("package.json",)
DEFAULT_IGNORE = ("node_modules/**/*", "**/node_modules/**/*")


def _ignore_spec(ignore: Iterable[str]) -> pathspec.PathSpec:
    return pathspec.PathSpec.from_lines("gitwildmatch", ignore)


def expand_glob(
    patterns: Iterable[str],
    cwd: Path,
    ignore: Iterable[str] = DEFAULT_IGNORE,
) -> list[str]:
    """Return POSIX paths, relative to ``cwd``, of files matching ``patterns``.

    A bare filename matches only at ``cwd`` itself; use ``**/`` to recurse.
    Matches are sorted within each pattern and de-duplicated across patterns.
    Ignore patterns use gitignore wildmatch rules, so a leading ``**/`` also
    matches at ``cwd``.
    """
    cwd = Path(cwd)
    try:
        ignore_spec = _ignore_spec(ignore)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid ignore pattern: {exc}") from exc
    found: list[str] = []
    seen: set[str] = set()

    for pattern in patterns:
        try:
            matches = sorted(cwd.glob(pattern))
        except (ValueError, NotImplementedError) as exc:
            raise ConfigurationError(f"Invalid file pattern '{pattern}': {exc}") from exc
        for path in matches:
            if not path.is_file():
                continue
            relative = path.relative_to(cwd).as_posix()
            if relative in seen or ignore_spec.match_file(relative):
                continue
            seen.add(relative)
            found.append(relative)

    return found
