"""Error taxonomy for codependence."""

from __future__ import annotations


class CodependenceError(RuntimeError):
    """Base error for failures raised by codependence."""


class ConfigurationError(CodependenceError):
    """Raised when options are missing, invalid, or cannot be loaded."""


class VersionLookupError(CodependenceError):
    """Raised when the latest version of a package cannot be determined."""


class InvalidTrackedEntry(CodependenceError, ValueError):
    """Raised when a codependency descriptor has the wrong shape."""


class ManifestReadError(CodependenceError):
    """Raised when a matched manifest is unreadable or not a JSON object."""


class ManifestWriteError(CodependenceError):
    """Raised when a corrected manifest cannot be written back."""
