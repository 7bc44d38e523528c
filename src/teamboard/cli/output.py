"""Colored status lines for CLI commands."""

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

CHECK = "\u2713"  # ✓
BULLET = "\u2022"  # •
CROSS = "\u2717"  # ✗


def success(message: str) -> None:
    """Print success message with green checkmark."""
    console.print(f"[green]{CHECK}[/] {escape(message)}")


def info(message: str) -> None:
    """Print info message with yellow bullet."""
    console.print(f"[yellow]{BULLET}[/] {escape(message)}")


def header(message: str) -> None:
    console.print(f"[bold blue]{escape(message)}[/]")


def error(message: str) -> None:
    """Print error message with red cross (to stderr)."""
    err_console.print(f"[red]{CROSS}[/] {escape(message)}")
