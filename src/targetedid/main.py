"""
Command-line entry point for targetedid.

Usage:
    targetedid <command> [args]
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from targetedid.cli.derive import handle_derive_command, register_derive_parser
from targetedid.cli.validate import (
    handle_algorithms_command,
    handle_validate_command,
    register_validate_parsers,
)
from targetedid.errors import ExitCode, main_with_error_handling
from targetedid.logging import bind_context, configure_logging
from targetedid.settings import get_settings

HANDLERS = {
    "derive": handle_derive_command,
    "validate": handle_validate_command,
    "algorithms": handle_algorithms_command,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="targetedid",
        description="Derive pseudonymous eduPersonTargetedID values",
    )
    parser.add_argument(
        "--log-level",
        help="Log level (default: TARGETEDID_LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command")

    register_derive_parser(subparsers)
    register_validate_parsers(subparsers)

    return parser


@main_with_error_handling()
def run(args: argparse.Namespace) -> int:
    handler = HANDLERS.get(args.command)
    if handler is None:
        build_parser().print_help()
        return ExitCode.WARNING
    bind_context(command=args.command).debug("running_command")
    return handler(args)


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level, json_output=settings.log_json)

    sys.exit(run(args))


if __name__ == "__main__":
    main()
