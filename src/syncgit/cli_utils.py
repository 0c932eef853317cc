"""Shared CLI helpers: console, exit codes, message formatting, logging setup."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

import typer
from rich.console import Console
from rich.logging import RichHandler

# Exit codes
EXIT_SUCCESS: Final[int] = 0
EXIT_ERROR: Final[int] = 1
EXIT_CONFIG_ERROR: Final[int] = 2
EXIT_INTERRUPTED: Final[int] = 130

console = Console()


def _setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging with a Rich handler.

    Args:
        verbose: Show DEBUG messages (every git invocation, parse decisions).
        quiet: Only show ERROR messages.

    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )


def _error(message: str) -> None:
    console.print(f"[red]✗[/red] {message}")


def _success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def _warning(message: str) -> None:
    console.print(f"[yellow]⚠[/yellow] {message}")


def _info(message: str) -> None:
    console.print(f"[blue]ℹ[/blue] {message}")


def _validate_start_dir(path: str | None) -> Path:
    """Resolve the directory the workflow starts from.

    Raises:
        typer.Exit: If the path does not exist or is not a directory.

    """
    start_dir = Path(path).expanduser().resolve() if path else Path.cwd()

    if not start_dir.exists():
        _error(f"Directory does not exist: {start_dir}")
        raise typer.Exit(code=EXIT_ERROR)

    if not start_dir.is_dir():
        _error(f"Path is not a directory: {start_dir}")
        raise typer.Exit(code=EXIT_ERROR)

    return start_dir
