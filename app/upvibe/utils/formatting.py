"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from upvibe.core.theme import get_theme
from upvibe.models.version import UpdateType


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_package_table(title: str = "Configured Packages") -> Table:
    """Create a pre-configured table for displaying configured packages.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for package display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("#", style="muted", justify="right")
    table.add_column("Package", style="package.name", no_wrap=True)
    table.add_column("Scope", style="text")
    table.add_column("Strategy", style="info")
    table.add_column("Version", style="version")
    table.add_column("Postinstall", style="muted", justify="right")
    return table


def format_update_type(update_type: UpdateType) -> str:
    """Format an update type label with color markup.

    Returns:
        Rich markup such as "[update_minor](minor)[/]", or "" for NONE.
    """
    if update_type == UpdateType.NONE:
        return ""
    return f"[update_{update_type.value}]({update_type.value})[/]"


def print_info(message: str) -> None:
    """Print an info message. The message is printed literally."""
    console.print(f"[info]{escape(message)}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{escape(message)}[/]")
