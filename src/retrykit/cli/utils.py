"""
CLI utility helpers — output formatting for Results and settings.
"""

from __future__ import annotations

import json
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from retrykit.core.errors import RetryKitError
from retrykit.core.result import Err, Ok, Result

console = Console()
err_console = Console(stderr=True)


def output_result(result: Result[Any], *, as_json: bool = False, title: str = "") -> None:
    """Render a ``Result`` to the terminal; Err exits with code 1."""
    if as_json:
        console.print_json(json.dumps(result.to_dict(), default=str))
        if result.is_err():
            raise typer.Exit(code=1)
        return

    match result:
        case Ok(value):
            if title:
                console.print(f"[bold]{title}[/bold]")
            console.print(f"[bold green]Ok[/bold green]: {value}")
        case Err(error):
            code = error.category.value if isinstance(error, RetryKitError) else type(error).__name__
            err_console.print(f"[bold red]Error[/bold red] ({code}): {error}")
            raise typer.Exit(code=1)


def print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as a two-column Rich table."""
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    table.add_column("Setting")
    table.add_column("Value", overflow="fold")
    for key, value in data.items():
        table.add_row(key, str(value))
    console.print(table)
