"""codependence core package.

Checks that tracked ("codependency") packages are declared at their expected
versions across package.json manifests, and optionally rewrites them. The
scanning logic in ``core`` is callable from the CLI and from Python code.
"""

from .config import Options, build_options, load_options
from .core import run, run_async
from .models import ScanResult

__all__ = [
    "Options",
    "ScanResult",
    "build_options",
    "load_options",
    "run",
    "run_async",
]
