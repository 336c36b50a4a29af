"""Console helpers shared by the click commands."""

import functools
import sys
from typing import Callable

import click
from rich.console import Console
from rich.markup import escape

err_console = Console(stderr=True)


def info(message: str) -> None:
    """Print an informational message."""
    err_console.print(f"[cyan]{escape(message)}[/cyan]")


def success(message: str) -> None:
    """Print a success message."""
    err_console.print(f"[bold green]✓[/bold green] {escape(message)}")


def warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[yellow]⚠ {escape(message)}[/yellow]")


def error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[bold red]✗[/bold red] {escape(message)}", highlight=False)


def handle_errors(func: Callable) -> Callable:
    """Turn interrupts and uncaught exceptions in a command into exit code 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (click.exceptions.Exit, click.ClickException, SystemExit):
            raise
        except KeyboardInterrupt:
            warning("Interrupted")
            sys.exit(1)
        except Exception as e:
            error(f"Error: {e}")
            sys.exit(1)

    return wrapper
