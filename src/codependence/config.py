"""Layered configuration for codependence runs.

Options are resolved once, lowest precedence first, from built-in defaults,
a configuration file, and options given on the command line. The resolved
``Options`` value is immutable and is all the orchestrator ever sees.

A configuration file is either passed explicitly, named by the
``CODEPENDENCE_CONFIG`` environment variable, or discovered by searching the
working directory and its parents for one of ``CONFIG_FILENAMES`` (or a
``package.json`` with a ``codependence`` key). Content nested under a
``codependence`` key is unwrapped. Documents are validated against
``CONFIG_SCHEMA`` with jsonschema.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from .discovery import DEFAULT_FILES, DEFAULT_IGNORE
from .errors import ConfigurationError
from .lookups import DEFAULT_REGISTRY, LOOKUP_KINDS

CONFIG_PATH_ENV_VAR = "CODEPENDENCE_CONFIG"
CONFIG_NAMESPACE = "codependence"
CONFIG_FILENAMES = (
    ".codependencerc",
    ".codependencerc.json",
    "codependence.config.json",
)

CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "codependencies": {
            "type": "array",
            "items": {
                "anyOf": [
                    {"type": "string", "minLength": 1},
                    {
                        "type": "object",
                        "minProperties": 1,
                        "maxProperties": 1,
                        "additionalProperties": {"type": ["string", "number"]},
                    },
                ]
            },
        },
        "files": {"type": "array", "items": {"type": "string", "minLength": 1}},
        "rootDir": {"type": "string"},
        "ignore": {"type": "array", "items": {"type": "string"}},
        "update": {"type": "boolean"},
        "debug": {"type": "boolean"},
        "silent": {"type": "boolean"},
        "isTesting": {"type": "boolean"},
        "lookup": {"enum": list(LOOKUP_KINDS)},
        "registry": {"type": "string", "minLength": 1},
        "timeout": {"type": ["number", "null"], "exclusiveMinimum": 0},
    },
}

# config/CLI key -> Options field
_KEY_MAP = {
    "codependencies": "codependencies",
    "files": "files",
    "rootDir": "root_dir",
    "ignore": "ignore",
    "update": "update",
    "debug": "debug",
    "silent": "silent",
    "isTesting": "is_testing",
    "lookup": "lookup",
    "registry": "registry",
    "timeout": "timeout",
}


@dataclass(slots=True, frozen=True)
class Options:
    """Fully resolved options for a single scan."""

    codependencies: tuple[Any, ...] = ()
    files: tuple[str, ...] = DEFAULT_FILES
    root_dir: Path = Path(".")
    ignore: tuple[str, ...] = DEFAULT_IGNORE
    update: bool = False
    debug: bool = False
    silent: bool = False
    is_testing: bool = False
    is_cli: bool = False
    lookup: str = "npm"
    registry: str = DEFAULT_REGISTRY
    timeout: float | None = None
    config_path: Path | None = field(default=None, compare=False)

    def with_cli(self) -> Options:
        return replace(self, is_cli=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "codependencies": list(self.codependencies),
            "files": list(self.files),
            "rootDir": str(self.root_dir),
            "ignore": list(self.ignore),
            "update": self.update,
            "debug": self.debug,
            "silent": self.silent,
            "isTesting": self.is_testing,
            "isCLI": self.is_cli,
            "lookup": self.lookup,
            "registry": self.registry,
            "timeout": self.timeout,
            "config": str(self.config_path) if self.config_path else None,
        }


def _format_errors(errors: Iterable) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"- {pointer or '<root>'}: {error.message}")
    return "\n".join(messages)


def validate_config(document: Mapping[str, Any], source: str = "<config>") -> None:
    """Raise ConfigurationError when ``document`` does not match CONFIG_SCHEMA."""
    validator = Draft202012Validator(CONFIG_SCHEMA)
    errors = sorted(validator.iter_errors(document), key=lambda e: list(e.path))
    if errors:
        raise ConfigurationError(f"Invalid configuration in {source}:\n{_format_errors(errors)}")


def _read_json(path: Path) -> Any:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to read configuration file: {exc}") from exc
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in configuration file {path}: {exc}") from exc


def _unwrap(data: Any, path: Path) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration in {path} must be a JSON object")
    if CONFIG_NAMESPACE in data:
        namespaced = data[CONFIG_NAMESPACE]
        if not isinstance(namespaced, dict):
            raise ConfigurationError(f"'{CONFIG_NAMESPACE}' in {path} must be an object")
        return namespaced
    return data


def find_config_file(start: Path | None = None) -> Path | None:
    """Search ``start`` and its parents for a configuration file."""
    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        for filename in CONFIG_FILENAMES:
            candidate = candidate_dir / filename
            if candidate.is_file():
                return candidate
        package_json = candidate_dir / "package.json"
        if package_json.is_file():
            try:
                data = json.loads(package_json.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError):
                continue
            if isinstance(data, dict) and CONFIG_NAMESPACE in data:
                return package_json
    return None


def _resolve_config_path(path: Path | str | None, start: Path | None) -> Path | None:
    """Resolve the configuration file path.

    Priority:
    1. Explicit path argument
    2. CODEPENDENCE_CONFIG environment variable
    3. Search from ``start`` upwards
    """
    if path is not None:
        return Path(path)

    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)

    return find_config_file(start)


def load_config_file(
    path: Path | str | None = None,
    start: Path | None = None,
) -> tuple[dict[str, Any], Path | None]:
    """Load and validate a configuration file.

    Returns the configuration mapping and the path it came from; both are
    empty when no file is found by search.

    Raises:
        ConfigurationError: If an explicit file is missing or any file is invalid.
    """
    config_path = _resolve_config_path(path, start)
    if config_path is None:
        return {}, None

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    data = _unwrap(_read_json(config_path), config_path)
    known = {key: value for key, value in data.items() if key in _KEY_MAP}
    validate_config(known, str(config_path))
    return known, config_path


def _coerce(key: str, value: Any) -> Any:
    if key in {"codependencies", "files", "ignore"}:
        return tuple(value)
    if key == "rootDir":
        return Path(value)
    if key == "timeout":
        return None if value is None else float(value)
    return value


def build_options(
    cli_options: Mapping[str, Any] | None = None,
    config: Mapping[str, Any] | None = None,
    config_path: Path | None = None,
) -> Options:
    """Merge defaults, ``config`` and ``cli_options`` (highest precedence) into Options."""
    merged: dict[str, Any] = {}
    for layer in (config or {}, cli_options or {}):
        for key, value in layer.items():
            if key not in _KEY_MAP:
                continue
            if value is None:
                continue
            merged[_KEY_MAP[key]] = _coerce(key, value)

    options = Options(config_path=config_path, **merged)
    if options.lookup not in LOOKUP_KINDS:
        known = ", ".join(LOOKUP_KINDS)
        raise ConfigurationError(f"Unknown lookup '{options.lookup}'. Known lookups: {known}")
    return options


def load_options(
    cli_options: Mapping[str, Any] | None = None,
    config: Path | str | None = None,
    start: Path | None = None,
) -> Options:
    """Discover and load the configuration file, then layer ``cli_options`` on top."""
    file_config, config_path = load_config_file(config, start)
    return build_options(cli_options, file_config, config_path)
