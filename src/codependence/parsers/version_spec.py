"""Split npm version strings into their range specifier and bare version.

Only a single leading ``^`` or ``~`` is recognised; the remainder is kept as
an opaque string and never validated as semver.
"""

from __future__ import annotations

from ..models.version_spec import SPECIFIERS, VersionSpec


def parse(version: str) -> VersionSpec:
    first = version[:1]
    if first in SPECIFIERS:
        return VersionSpec(specifier=first, bare_version=version[1:])
    return VersionSpec(specifier="", bare_version=version)
