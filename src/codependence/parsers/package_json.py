"""Read and write package.json manifests."""

from __future__ import annotations

import json
from pathlib import Path

from ..errors import ManifestReadError, ManifestWriteError
from ..models.manifest import Manifest


def load(path: Path) -> Manifest:
    """Parse ``path`` into a Manifest.

    Raises:
        ManifestReadError: If the file cannot be read or is not a JSON object.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestReadError(f"Failed to read manifest {path}: {exc}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ManifestReadError(f"Invalid JSON in manifest {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ManifestReadError(f"Manifest {path} must be a JSON object")

    return Manifest(path=path, data=data)


def dump(manifest: Manifest) -> str:
    """Serialize the manifest content with two-space indentation and a trailing newline."""
    return json.dumps(dict(manifest.data), indent=2, ensure_ascii=False) + "\n"


def write(manifest: Manifest) -> None:
    """Overwrite the manifest's file with its serialized content in one write."""
    text = dump(manifest)
    try:
        manifest.path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ManifestWriteError(f"Failed to write manifest {manifest.path}: {exc}") from exc
