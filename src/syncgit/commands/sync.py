"""Sync command for syncgit CLI.

Runs the guided pull, stage, commit and push workflow.
"""

import typer

from syncgit.cli_utils import (
    EXIT_CONFIG_ERROR,
    _error,
    _setup_logging,
    _validate_start_dir,
    console,
)
from syncgit.core.exceptions import ConfigError
from syncgit.sync import SyncOrchestrator, SyncUI


def sync_command(
    path: str = typer.Option(
        None,
        "--path",
        "-p",
        help="Directory to run from (default: current directory)",
    ),
    no_push: bool = typer.Option(
        False,
        "--no-push",
        help="Commit locally but do not push",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Auto-confirm pauses and yes/no questions (commit message still required)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (every git command is logged)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
) -> None:
    """Pull, review, stage, commit and push changes under the current folder.

    Only changes below the folder you run from are staged. Pull and push
    are skipped with a notice when the network is unreachable; the commit
    is then kept locally.

    Examples:
        syncgit                     # Run from the current folder
        syncgit sync -p ./service   # Run for another folder
        syncgit sync --no-push      # Stop after the local commit

    """
    _setup_logging(verbose=verbose, quiet=quiet)
    start_dir = _validate_start_dir(path)

    orchestrator = SyncOrchestrator(
        start_dir,
        ui=SyncUI(console=console, assume_yes=yes),
        push=not no_push,
    )

    try:
        report = orchestrator.run()
    except ConfigError as e:
        _error(f"Config error: {e}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from None

    raise typer.Exit(code=report.exit_code)
