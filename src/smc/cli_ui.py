"""
Rich UI helpers for the SMC CLI.

Provides styled status lines and the tables used by `smc inspect`.
"""

from rich import box
from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.text import Text

console = Console()

# Style definitions
STYLES = {
    "title": Style(color="bright_cyan", bold=True),
    "subtitle": Style(color="bright_black"),
    "success": Style(color="green", bold=True),
    "warning": Style(color="yellow"),
    "info": Style(color="cyan"),
}


def print_header(title: str, subtitle: str = "") -> None:
    """Print a styled header."""
    console.print()
    console.print(Text(title, style=STYLES["title"]))
    if subtitle:
        console.print(Text(subtitle, style=STYLES["subtitle"]))
    console.print()


def print_success(message: str) -> None:
    console.print(Text(f"✓ {message}", style=STYLES["success"]))


def print_warning(message: str) -> None:
    console.print(Text(f"⚠ {message}", style=STYLES["warning"]))


def print_info(message: str) -> None:
    console.print(Text(f"ℹ {message}", style=STYLES["info"]))


def display_table(title: str, columns: list[str], rows: list[list[str]]) -> None:
    """Print rows as a rounded table with a bold header."""
    table = Table(title=title, box=box.ROUNDED, show_header=True, header_style="bold cyan")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*row)
    console.print(table)
