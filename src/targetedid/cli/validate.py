"""
CLI commands for checking configuration.

Commands:
    targetedid validate [--config FILE]   - Show the effective configuration per named value
    targetedid algorithms                 - List supported hash algorithms
"""

from __future__ import annotations

import argparse

from rich.markup import escape
from rich.table import Table

from targetedid.cli.derive import add_config_argument, resolve_config_path
from targetedid.cli.ux import console, error, header, success
from targetedid.config import apply_settings, build_value_configs, load_config
from targetedid.errors import ExitCode, TargetedIDError, format_error_message
from targetedid.models import HashAlgorithm, ValueConfig
from targetedid.settings import Settings, get_settings


def validate_command(
    config_path: str | None = None,
    output_format: str = "table",
    settings: Settings | None = None,
) -> int:
    """
    Build the effective configuration and report it.

    Exit codes:
        0 - Configuration is valid
        10 - Configuration error

    Args:
        config_path: YAML configuration file (default: TARGETEDID_CONFIG_PATH)
        output_format: Output format ("table" or "json")
        settings: Environment settings (config path and salt fallback)

    Returns:
        Exit code
    """
    settings = settings or get_settings()
    try:
        path = resolve_config_path(config_path, settings)
        values = build_value_configs(apply_settings(load_config(path), settings))
    except TargetedIDError as e:
        if output_format == "json":
            console.print_json(
                data={"valid": False, "error": e.message, "details": e.details}
            )
        else:
            error(format_error_message(e))
        return e.exit_code

    if output_format == "json":
        console.print_json(
            data={"valid": True, "values": [v.to_dict() for v in values.values()]}
        )
    else:
        _print_validate_output(path, list(values.values()))

    return ExitCode.SUCCESS


def _print_validate_output(path: str, values: list[ValueConfig]) -> None:
    """Print the effective configuration of every named value."""
    console.print()
    header(f"Configuration: {path}")
    console.print()

    for value in values:
        table = Table(title=escape(value.name), show_header=True, header_style="bold")
        table.add_column("Option")
        table.add_column("Value", overflow="fold")
        for option, setting in value.to_dict().items():
            if option == "name":
                continue
            table.add_row(option, escape(_format_setting(setting)))
        console.print(table)
        console.print()

    success(f"{len(values)} named value{'s' if len(values) != 1 else ''} configured")
    console.print()


def _format_setting(setting: object) -> str:
    if setting is None:
        return "-"
    if isinstance(setting, list):
        return ", ".join(_format_setting(s) for s in setting) or "(empty)"
    return str(setting)


def algorithms_command(output_format: str = "table") -> int:
    """
    List the supported hash algorithms.

    Exit codes:
        0 - Success
    """
    names = [algorithm.value for algorithm in HashAlgorithm]

    if output_format == "json":
        console.print_json(data=names)
    else:
        console.print()
        header("Hash Algorithms")
        console.print()
        for name in names:
            console.print(f"  - {name}")
        console.print()

    return ExitCode.SUCCESS


def register_validate_parsers(subparsers: argparse._SubParsersAction) -> None:
    """Register the validate and algorithms subcommands."""
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate configuration and show the effective options per named value",
    )
    add_config_argument(validate_parser)
    validate_parser.add_argument(
        "--format",
        "-f",
        dest="output_format",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )

    algorithms_parser = subparsers.add_parser(
        "algorithms",
        help="List supported hash algorithms",
    )
    algorithms_parser.add_argument(
        "--format",
        "-f",
        dest="output_format",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )


def handle_validate_command(args: argparse.Namespace) -> int:
    """Handle validate command from CLI args."""
    return validate_command(
        config_path=getattr(args, "config", None),
        output_format=getattr(args, "output_format", "table"),
    )


def handle_algorithms_command(args: argparse.Namespace) -> int:
    """Handle algorithms command from CLI args."""
    return algorithms_command(output_format=getattr(args, "output_format", "table"))
