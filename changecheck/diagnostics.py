from __future__ import annotations

from rich.console import Console
from rich.markup import escape


err_console = Console(stderr=True, highlight=False)


def warn(message: str, *, console: Console | None = None) -> None:
    (console or err_console).print(f"[yellow]{escape(message)}[/yellow]")


def error(message: str, *, console: Console | None = None) -> None:
    (console or err_console).print(f"[red]{escape(message)}[/red]")
