"""Data models for the codependency version audit."""

from __future__ import annotations

from .manifest import Manifest
from .scan_result import ScanResult
from .tracked_package import Resolution, TrackedPackage
from .update_candidate import SECTIONS, CandidateLists, UpdateCandidate
from .version_spec import SPECIFIERS, VersionSpec

__all__ = [
    "SECTIONS",
    "SPECIFIERS",
    "CandidateLists",
    "Manifest",
    "Resolution",
    "ScanResult",
    "TrackedPackage",
    "UpdateCandidate",
    "VersionSpec",
]
