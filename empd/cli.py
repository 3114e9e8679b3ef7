"""CLI entrypoint for the empd command."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TextIO

from . import __version__
from .config import ConfigError, load_config
from .inspector import InspectionError, PathInspector
from .logging import configure_logging, get_logger

FATAL_EXIT_CODE = 101
CONFIG_ERROR_EXIT_CODE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="empd",
        description=(
            "Checks if a directory or file is empty, or if a symbolic link points to a "
            "path that does not exist. Only supports UTF-8 paths."
        ),
    )
    parser.add_argument(
        "-d",
        "--delete-if-empty",
        action="store_true",
        help="Delete the file or directory if it is empty (asks for confirmation).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .empd.yml or the directory holding it (defaults to current directory).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log messages to this file.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("path", help="Path to test.")
    return parser


def run(
    argv: list[str] | None = None,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Parse arguments, inspect the path and return the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    err = stderr if stderr is not None else sys.stderr

    try:
        config = load_config(args.config if args.config is not None else Path.cwd())
    except ConfigError as exc:
        print(f"empd: {exc}", file=err)
        return _finish(CONFIG_ERROR_EXIT_CODE, err)

    verbose = bool(args.verbose) or config.verbose
    log_file = args.log_file if args.log_file is not None else config.log_file
    try:
        configure_logging(verbose=verbose, log_file=log_file, stream=err)
    except OSError as exc:
        print(f'empd: Could not open log file "{log_file}": {exc}', file=err)
        return _finish(CONFIG_ERROR_EXIT_CODE, err)
    logger = get_logger("cli")

    inspector = PathInspector(stdin=stdin, stdout=stdout, stderr=stderr)
    try:
        result = inspector.inspect(
            args.path,
            delete_if_empty=bool(args.delete_if_empty) or config.delete_if_empty,
        )
    except InspectionError as exc:
        logger.debug("Inspection of %s failed", args.path, exc_info=verbose)
        print(f"empd: {exc}", file=err)
        exit_code = FATAL_EXIT_CODE
    else:
        exit_code = result.exit_code

    return _finish(exit_code, err)


def _finish(exit_code: int, err: TextIO) -> int:
    if exit_code != 0:
        print(f"Exiting with non-zero exit code {exit_code}", file=err)
    return exit_code


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for the empd command."""
    sys.exit(run(argv))


if __name__ == "__main__":
    main(sys.argv[1:])
