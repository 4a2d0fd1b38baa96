"""Rich-based console output utilities."""

from collections.abc import Mapping, Sequence
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from ticketeer import SCRIPT_NAME, __version__

custom_theme = Theme(
    {
        "error": "bold red",
        "success": "bold green",
        "warning": "bold yellow",
        "info": "bold blue",
        "header": "bold magenta",
    }
)

# Global console instances
console = Console(theme=custom_theme)
console_err = Console(theme=custom_theme, stderr=True)


def print_error(message: str) -> None:
    """Print error message in red."""
    from ticketeer.utils.logging import log_message

    console_err.print(f"[error][[ERROR]][/error] [red]{message}[/red]")
    log_message(f"ERROR: {message}")


def print_warning(message: str) -> None:
    """Print warning message in yellow."""
    from ticketeer.utils.logging import log_message

    console_err.print(f"[warning][[WARNING]][/warning] [yellow]{message}[/yellow]")
    log_message(f"WARNING: {message}")


def print_info(message: str) -> None:
    """Print info message in blue/cyan."""
    from ticketeer.utils.logging import log_message

    console.print(f"[info][[INFO]][/info] [cyan]{message}[/cyan]")
    log_message(f"INFO: {message}")


def print_tickets(tickets: Sequence[Mapping[str, Any]]) -> None:
    """Render tickets as a table.

    Optional columns are left blank for tickets that do not carry them.
    """
    table = Table(title="Tickets", header_style="header")
    table.add_column("ID", style="bold")
    table.add_column("Type")
    table.add_column("Title")
    table.add_column("URL", style="cyan")
    for ticket in tickets:
        table.add_row(
            ticket["id"],
            ticket.get("type", ""),
            ticket["title"],
            ticket["url"],
        )
    console.print(table)


def show_version() -> None:
    """Display version information."""
    console.print(f"[bold]{SCRIPT_NAME}[/bold] v{__version__}")


__all__ = [
    "console",
    "console_err",
    "custom_theme",
    "print_error",
    "print_warning",
    "print_info",
    "print_tickets",
    "show_version",
]
