"""
CLI Output Utilities

Machine-aware output functions that adapt based on machine mode.
"""

import json
import sys
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from .config import CLIConfig

_console = Console()


def echo(message: str = "", **kwargs) -> None:
    typer.echo(message, **kwargs)


def print_table(table: Table) -> None:
    """Print a rich table. Tables are a human-mode presentation only."""
    if not CLIConfig.is_machine_mode():
        _console.print(table)


def print_json(data: Any, minified: bool = None) -> None:
    """
    Print JSON data. In machine mode, always minifies. In human mode, pretty prints.
    """
    if minified is None:
        minified = CLIConfig.is_machine_mode()

    if minified:
        echo(json.dumps(data, separators=(',', ':')))
    else:
        echo(json.dumps(data, indent=2))


def print_error(message: str, code: Optional[str] = None) -> None:
    """
    Print an error to stderr. Machine mode emits a JSON object.
    """
    if CLIConfig.is_machine_mode():
        payload = {"status": "error", "message": message}
        if code:
            payload["code"] = code
        typer.echo(json.dumps(payload, separators=(',', ':')), err=True)
    else:
        Console(file=sys.stderr).print(f"[bold red]Error:[/bold red] {message}")
