"""Rich console output utilities for the addonctl CLI."""

from pathlib import Path
from typing import Any, Mapping

from rich.console import Console
from rich.table import Table


console = Console()
error_console = Console(stderr=True)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]![/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]→[/blue] {message}")


def print_key_value(key: str, value: Any, key_style: str = "bold") -> None:
    """Print a key-value pair."""
    console.print(f"[{key_style}]{key}:[/{key_style}] {value}")


def print_resources(title: str, resources: Mapping[str, Path]) -> None:
    """Print an id -> path mapping as a table."""
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Path", overflow="fold")

    for resource_id, path in sorted(resources.items()):
        table.add_row(resource_id, str(path))

    console.print(table)
