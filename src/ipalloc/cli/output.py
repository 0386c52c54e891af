"""Shared rich console and message helpers for CLI commands."""

import json

from rich.console import Console

console = Console()
err_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print an error message in red."""
    err_console.print(f"[bold red]Error:[/bold red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    err_console.print(f"[yellow]Warning:[/yellow] {message}")


def print_json(data: object) -> None:
    """Print data as indented JSON without rich markup."""
    console.print_json(json.dumps(data, default=str))
