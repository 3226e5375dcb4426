"""
CLI command for deriving targeted identifiers.

Runs the processing step against a request state document, without a
hosting identity provider.

Commands:
    targetedid derive <state> [--config FILE]  - Derive values for a request state
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

import yaml
from rich.markup import escape
from rich.table import Table

from targetedid.cli.ux import console, error, header, warning
from targetedid.config import apply_settings, load_config
from targetedid.errors import (
    ConfigurationError,
    ExitCode,
    TargetedIDError,
    ValidationError,
    format_error_message,
)
from targetedid.processor import OUTPUT_ATTRIBUTE, TargetedIDProcessor
from targetedid.settings import Settings, get_settings


def resolve_config_path(config_path: str | None, settings: Settings) -> str:
    """Pick the explicit configuration path or the one from the environment."""
    path = config_path or settings.config_path
    if not path:
        raise ConfigurationError(
            "no configuration file given",
            details={"hint": "use --config or set TARGETEDID_CONFIG_PATH"},
        )
    return path


def add_config_argument(parser: argparse.ArgumentParser) -> None:
    """Add the shared --config option."""
    parser.add_argument(
        "--config",
        "-c",
        help="Path to YAML configuration file (default: TARGETEDID_CONFIG_PATH)",
    )


def load_state(path: str | Path) -> dict[str, Any]:
    """
    Load a request state document (YAML or JSON).

    Raises:
        ValidationError: If the file is missing, unparseable or not a mapping
    """
    state_path = Path(path)
    if not state_path.exists():
        raise ValidationError(f"state file not found: {state_path}")

    try:
        with open(state_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValidationError(
            f"invalid state file: {state_path}",
            details={"error": str(e)},
        ) from e

    if not isinstance(data, dict):
        raise ValidationError(
            f"state file must contain a mapping: {state_path}",
            details={"got": type(data).__name__},
        )
    return data


def derive_command(
    state_path: str,
    config_path: str | None = None,
    output_format: str = "table",
    settings: Settings | None = None,
) -> int:
    """
    Derive eduPersonTargetedID values for a request state.

    Exit codes:
        0 - At least one value derived
        1 - Every named value was skipped by its filters
        10 - Configuration error
        12 - Invalid state document

    Args:
        state_path: YAML/JSON request state document
        config_path: YAML configuration file (default: TARGETEDID_CONFIG_PATH)
        output_format: Output format ("table" or "json")
        settings: Environment settings (config path and salt fallback)

    Returns:
        Exit code
    """
    settings = settings or get_settings()
    try:
        config = apply_settings(load_config(resolve_config_path(config_path, settings)), settings)
        state = load_state(state_path)
        processor = TargetedIDProcessor(config)
    except TargetedIDError as e:
        error(format_error_message(e))
        return e.exit_code

    values = processor.process(state)

    if output_format == "json":
        console.print_json(data={"attribute": OUTPUT_ATTRIBUTE, "values": values})
    else:
        _print_derive_output(values)

    return ExitCode.SUCCESS if values else ExitCode.WARNING


def _print_derive_output(values: list[Any]) -> None:
    """Print derived values."""
    console.print()
    header(OUTPUT_ATTRIBUTE)
    console.print()

    if not values:
        warning("No values derived, every named value was skipped")
        console.print()
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("#")
    table.add_column("Value", overflow="fold")

    for index, value in enumerate(values, start=1):
        table.add_row(str(index), escape(str(value)))

    console.print(table)
    console.print()
    console.print(f"[muted]{len(values)} value{'s' if len(values) != 1 else ''} derived[/muted]")
    console.print()


def register_derive_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the derive subcommand."""
    derive_parser = subparsers.add_parser(
        "derive",
        help="Derive eduPersonTargetedID values for a request state",
    )
    derive_parser.add_argument("state", help="Path to YAML/JSON request state document")
    add_config_argument(derive_parser)
    derive_parser.add_argument(
        "--format",
        "-f",
        dest="output_format",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )


def handle_derive_command(args: argparse.Namespace) -> int:
    """Handle derive command from CLI args."""
    return derive_command(
        state_path=args.state,
        config_path=getattr(args, "config", None),
        output_format=getattr(args, "output_format", "table"),
    )
