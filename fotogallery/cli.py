"""Command line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from importlib.metadata import PackageNotFoundError, version

from .cache import shared as shared_cache
from .errors import FatalError
from .export import export
from .preview import serve

log = logging.getLogger(__name__)

REVISION = ""
_PACKAGE_LOGGER = __name__.rpartition(".")[0]
_HANDLER_NAME = f"{_PACKAGE_LOGGER}-console"


def _configure_logging(verbose: bool) -> None:
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    for existing in list(logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logger.removeHandler(existing)
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s", "%H:%M:%S"))
    logger.addHandler(handler)


def _package_version() -> str:
    try:
        return version(_PACKAGE_LOGGER)
    except PackageNotFoundError:
        return ""


def _clear_cache(args: argparse.Namespace) -> str | None:
    shared_cache().clear()
    return None


def _export(args: argparse.Namespace) -> str | None:
    export(args.output, args.minimize)
    return None


def _preview(args: argparse.Namespace) -> str | None:
    serve(args.port)
    return None


def _version(args: argparse.Namespace) -> str | None:
    return f"foto v{_package_version()}+{REVISION}"


def _add_verbose(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS, help="verbose output"
    )


def build_parser() -> argparse.ArgumentParser:
    """The argument parser for every command."""
    parser = argparse.ArgumentParser(prog="foto", description="Yet another publishing tool for photographers")
    parser.add_argument("-v", "--verbose", action="store_true", help="verbose output")
    commands = parser.add_subparsers(dest="command", metavar="command")

    clear = commands.add_parser("clear-cache", help="Clear local cache", description="Clear local cache")
    _add_verbose(clear)
    clear.set_defaults(handler=_clear_cache)

    exporting = commands.add_parser("export", help="Export sites", description="Export sites")
    _add_verbose(exporting)
    exporting.add_argument("-o", "--output", default="dist", help="Output directory")
    exporting.add_argument(
        "-m",
        "--minimize",
        action="store_true",
        help="Whether to minimize output files (css, html, js supported) or not",
    )
    exporting.set_defaults(handler=_export)

    preview = commands.add_parser(
        "preview", help="Preview in local environment", description="Preview in local environment"
    )
    _add_verbose(preview)
    preview.add_argument("-p", "--port", type=int, default=5000, help="Port")
    preview.set_defaults(handler=_preview)

    show_version = commands.add_parser("version", help="Print the version", description="Print the version")
    _add_verbose(show_version)
    show_version.set_defaults(handler=_version)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 0

    try:
        output = handler(args)
    except FatalError as err:
        log.error("%s", err)
        return 1
    if output is not None:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())