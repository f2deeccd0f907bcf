"""Console helpers shared by the tool CLIs."""

import functools
import sys
from typing import Any, Callable, Optional

from rich.console import Console
from rich.table import Table

# Diagnostics go to stderr so stdout stays clean for tool output
console = Console(stderr=True)


def info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[cyan]ℹ[/cyan] {message}")


def success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]✓[/bold green] {message}")


def warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]✗[/bold red] {message}")


def create_table(title: Optional[str] = None) -> Table:
    """Create a table with the default tool styling."""
    return Table(title=title, show_header=True, header_style="bold magenta")


def print_table(table: Table) -> None:
    """Print a table to the console."""
    console.print(table)


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Turn uncaught exceptions into a clean error message and exit code.

    SystemExit passes through untouched.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            warning("Interrupted")
            sys.exit(130)
        except Exception as e:
            error(f"Unexpected error: {e}")
            sys.exit(1)

    return wrapper
