"""Collaborators that look up the latest published version of a package.

Each lookup is an async callable taking a package name and returning the raw
text of the answer; the resolver strips trailing newlines itself.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from functools import partial
from typing import TypeAlias
from urllib.parse import quote

import requests
from requests import Response
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from .errors import ConfigurationError, VersionLookupError

QueryLatest: TypeAlias = Callable[[str], Awaitable[str]]

DEFAULT_REGISTRY = "https://registry.npmjs.org"
LOOKUP_KINDS = ("npm", "registry")

USER_AGENT = "codependence-python"


async def npm_view(name: str) -> str:
    """Return the stdout of ``npm view <name> version latest``."""
    try:
        proc = await asyncio.create_subprocess_exec(
            "npm",
            "view",
            name,
            "version",
            "latest",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        raise VersionLookupError("npm executable not found on PATH") from exc

    stdout, stderr = await proc.communicate()
    if proc.returncode != 0:
        raise VersionLookupError(
            f"npm view {name} failed (exit {proc.returncode}): "
            f"{stderr.decode('utf-8', errors='replace').strip()}"
        )
    return stdout.decode("utf-8", errors="replace")


@retry(
    reraise=True,
    retry=retry_if_exception_type(requests.RequestException),
    stop=stop_after_attempt(3),
    wait=wait_fixed(2),
)
def _http_get(url: str) -> Response:
    return requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=30)


def _fetch_registry_version(name: str, registry: str) -> str:
    url = f"{registry.rstrip('/')}/{quote(name, safe='@')}/latest"
    try:
        response = _http_get(url)
    except requests.RequestException as exc:
        raise VersionLookupError(f"Failed to query {url}: {exc}") from exc

    if response.status_code != 200:
        raise VersionLookupError(f"Unexpected status code {response.status_code} fetching {url}")

    try:
        payload = response.json()
    except ValueError as exc:
        raise VersionLookupError(f"Invalid JSON from {url}") from exc

    version = payload.get("version") if isinstance(payload, dict) else None
    if not isinstance(version, str) or not version:
        raise VersionLookupError(f"No version field in registry response for '{name}'")
    return version


async def registry_latest(name: str, registry: str = DEFAULT_REGISTRY) -> str:
    """Return the ``latest`` dist-tag version from an npm registry over HTTP."""
    return await asyncio.to_thread(_fetch_registry_version, name, registry)


def get_lookup(kind: str = "npm", registry: str | None = None) -> QueryLatest:
    """Return the lookup collaborator registered under ``kind``."""
    if kind == "npm":
        return npm_view
    if kind == "registry":
        return partial(registry_latest, registry=registry or DEFAULT_REGISTRY)
    known = ", ".join(LOOKUP_KINDS)
    raise ConfigurationError(f"Unknown lookup '{kind}'. Known lookups: {known}")
