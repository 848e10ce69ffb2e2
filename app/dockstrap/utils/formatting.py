"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich. Messages are
escaped before printing, so bracketed text in package-manager output is
shown verbatim. Every message printed through these helpers is also
recorded through the logging framework, so the run log mirrors what the
operator saw.
"""

import logging
import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dockstrap.core.theme import get_theme

logger = logging.getLogger(__name__)


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


def create_key_value_table(title: str) -> Table:
    """Create a two-column table for label/value listings.

    Args:
        title: Table title.

    Returns:
        Rich Table with "Item" and "Value" columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Item", style="muted", no_wrap=True)
    table.add_column("Value", style="text")
    return table


def print_step(title: str) -> None:
    """Print a pipeline step banner."""
    logger.info("[STEP] %s", title)
    console.print()
    console.rule(f"[step]{escape(title)}[/]", style="border")


def print_info(message: str) -> None:
    """Print an info message."""
    logger.info(message)
    console.print(f"[info]{escape(message)}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    logger.warning(message)
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    logger.error(message)
    err_console.print(f"[error]Error:[/] {escape(message)}")


def print_hints(hints: list[str]) -> None:
    """Print numbered remediation suggestions below an error."""
    if not hints:
        return
    err_console.print("[error]Suggested fixes:[/]")
    for number, hint in enumerate(hints, start=1):
        logger.error("  %d. %s", number, hint)
        err_console.print(f"  [muted]{number}.[/] {escape(hint)}")


def print_success(message: str) -> None:
    """Print a success message."""
    logger.info(message)
    console.print(f"[success]✓ {escape(message)}[/]")
