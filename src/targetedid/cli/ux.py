"""
CLI output helpers built on rich.

Environment handling:
- Respects NO_COLOR and FORCE_COLOR environment variables
- Falls back to plain text when stdout is not a terminal
"""

from __future__ import annotations

import os

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.theme import Theme

# Nord color palette (https://www.nordtheme.com/)
TARGETEDID_THEME = Theme(
    {
        "info": "#88C0D0",  # Nord frost - light blue
        "success": "#A3BE8C",  # Nord aurora - green
        "warning": "#EBCB8B",  # Nord aurora - yellow
        "error": "#BF616A bold",  # Nord aurora - red
        "muted": "#D8DEE9",  # Nord snow storm - light grey
    }
)

console = Console(
    theme=TARGETEDID_THEME,
    force_terminal=os.environ.get("FORCE_COLOR") is not None,
    no_color=os.environ.get("NO_COLOR") is not None,
)


def success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]✓ {escape(message)}[/success]")


def error(message: str) -> None:
    """Print an error message."""
    console.print(f"[error]✗ {escape(message)}[/error]")


def warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[warning]⚠ {escape(message)}[/warning]")


def header(title: str) -> None:
    """Print a section header."""
    console.print()
    console.print(Panel(f"[bold]{escape(title)}[/bold]", border_style="cyan"))
