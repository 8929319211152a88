"""CLI entrypoint: check that codependencies are pinned to the expected versions.

Usage:
  codependence --codependencies react '{"lodash": "4.17.21"}' [--update]

Exit codes: 0 when every manifest is correct or was updated, 1 when mismatches
were found without --update, 2 on fatal errors.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from .config import load_options
from .core import run
from .errors import CodependenceError, ConfigurationError
from .events import LOGGER, logging_sink, setup_logging
from .lookups import LOOKUP_KINDS

EXIT_FATAL = 2


def _codependency(value: str) -> Any:
    """Accept a bare package name or a JSON ``{"name": "version"}`` object."""
    if value.lstrip().startswith("{"):
        try:
            return json.loads(value)
        except json.JSONDecodeError as exc:
            raise argparse.ArgumentTypeError(
                f"invalid codependency object {value!r}: {exc.msg}"
            ) from exc
    return value


def _positive_seconds(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid timeout {value!r}") from exc
    if not seconds > 0:
        raise argparse.ArgumentTypeError(f"timeout must be greater than 0, got {value!r}")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    # SUPPRESS keeps options that were not passed out of the namespace so they
    # never mask configuration file values.
    parser = argparse.ArgumentParser(
        prog="codependence",
        description=(
            "Checks codependencies in package.json files to ensure "
            "dependencies are up-to-date"
        ),
        argument_default=argparse.SUPPRESS,
    )
    parser.add_argument(
        "-t",
        "--isTestingCLI",
        action="store_true",
        help="print the resolved options; no scan is run",
    )
    parser.add_argument(
        "--isTesting",
        "--dry-run",
        dest="isTesting",
        action="store_true",
        help="run the scan without overwriting package.json files",
    )
    parser.add_argument("-f", "--files", nargs="+", help="file glob pattern(s)")
    parser.add_argument(
        "-u", "--update", action="store_true", help="update dependencies based on check"
    )
    parser.add_argument("-r", "--rootDir", help="root directory to start search")
    parser.add_argument("-i", "--ignore", nargs="+", help="ignore glob pattern(s)")
    parser.add_argument("--debug", action="store_true", help="enable debugging")
    parser.add_argument("--silent", action="store_true", help="enable mainly silent logging")
    parser.add_argument(
        "-cds",
        "--codependencies",
        nargs="+",
        type=_codependency,
        help='package names, or JSON objects such as \'{"react": "18.2.0"}\' to pin a version',
    )
    parser.add_argument("-c", "--config", type=Path, help="path to a config file")
    parser.add_argument("--lookup", choices=LOOKUP_KINDS, help="how latest versions are looked up")
    parser.add_argument("--registry", help="registry URL used by --lookup registry")
    parser.add_argument(
        "--timeout", type=_positive_seconds, help="seconds to wait for each version lookup"
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = vars(parse_args(argv))
    config_path = args.pop("config", None)
    testing_cli = args.pop("isTestingCLI", False)

    try:
        options = load_options(args, config=config_path).with_cli()
    except ConfigurationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_FATAL

    setup_logging("DEBUG" if options.debug else "INFO")

    if testing_cli:
        print(json.dumps(options.to_dict(), indent=2))
        return 0

    try:
        result = run(options, emit=logging_sink(LOGGER))
    except CodependenceError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_FATAL

    return result.exit_code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
