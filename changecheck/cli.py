from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from changecheck.check_service import CheckResult, run_check
from changecheck.config import build_config, load_config_file
from changecheck.diagnostics import err_console, error
from changecheck.errors import StartupConfigError, UnknownStrategyError
from changecheck.strategies import register_default_strategies, registered_names


EXIT_STARTUP_ERROR = 1

app = typer.Typer(
    help="Detect whether files changed since the last run and optionally run a command.",
    add_completion=False,
)
console = Console()


def _render_changes(result: CheckResult) -> None:
    if not result.changes:
        return

    table = Table(title="Changes")
    table.add_column("Kind")
    table.add_column("Path")
    table.add_column("Detail")

    for record in result.changes:
        table.add_row(record.kind, escape(record.path), escape(record.detail))

    console.print(table)


@app.command()
def check(
    targets: list[str] | None = typer.Argument(
        None,
        help="Files or directories to check.",
        show_default=False,
    ),
    recursive: bool = typer.Option(False, "-r", help="Recurse into subdirectories."),
    include_directories: bool = typer.Option(
        False,
        "-d",
        help="Treat directories themselves as targets.",
    ),
    db: str | None = typer.Option(
        None,
        "-db",
        help="Database file holding the previous snapshot.",
        show_default=False,
    ),
    command: str | None = typer.Option(
        None,
        "-e",
        help="Command to run through the shell when a change is detected.",
        show_default=False,
    ),
    method: str | None = typer.Option(
        None,
        "-m",
        help="Checking method: 0/fast, 1/dirsummary, 2/filestat (default).",
        show_default=False,
    ),
    extensions: list[str] | None = typer.Option(
        None,
        "-ext",
        help="Only regular files ending with this extension are targets (repeatable, case-insensitive).",
        show_default=False,
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        help="JSON file with default values for the options above.",
        show_default=False,
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="List the detected changes."),
) -> None:
    """Check targets against the database and report whether anything changed."""
    try:
        file_values = load_config_file(config_file) if config_file is not None else None
        config = build_config(
            targets=targets,
            db_path=db,
            recursive=recursive,
            include_directories=include_directories,
            extensions=extensions,
            command=command,
            method=method,
            file_values=file_values,
        )
        result = run_check(config, console=err_console)
    except StartupConfigError as exc:
        error(str(exc), console=err_console)
        if isinstance(exc, UnknownStrategyError):
            err_console.print(f"Known methods: {', '.join(registered_names())}")
        raise typer.Exit(code=EXIT_STARTUP_ERROR) from None

    if verbose:
        _render_changes(result)
        if result.changed:
            console.print("[yellow]Changed.[/yellow]")
        else:
            console.print("[green]No changes detected.[/green]")


def main() -> None:
    register_default_strategies()
    app()
