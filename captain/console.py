"""Operator-facing output."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)

_RULE = "==================================="


def output_header(header: str) -> None:
    console.print()
    console.print(f"[bold]{_RULE}[/bold]")
    console.print()
    console.print(f"    [bold]{escape(header)}[/bold]")
    console.print()
    console.print(f"[bold]{_RULE}[/bold]")
    console.print()


def info(message: str) -> None:
    console.print(escape(message))


def success(message: str) -> None:
    console.print(f"[green]{escape(message)}[/green]")


def warn(message: str) -> None:
    console.print(f"[yellow]{escape(message)}[/yellow]")


def error(message: str) -> None:
    err_console.print(f"[red]Error: {escape(message)}[/red]")
