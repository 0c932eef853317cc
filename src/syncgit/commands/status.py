"""Status command for syncgit CLI.

Read-only view of the changes under the current folder, grouped by
top-level subfolder.
"""

import typer

from syncgit.cli_utils import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    _error,
    _info,
    _setup_logging,
    _validate_start_dir,
    console,
)
from syncgit.core.config import load_config
from syncgit.core.exceptions import ConfigError, GitCommandError, RepositoryNotFoundError
from syncgit.git import group_by_folder, has_staged, has_unstaged, parse_status, require_repo
from syncgit.git.status import split_by_subpath, untracked_mode_for
from syncgit.sync import SyncUI


def status_command(
    path: str = typer.Option(
        None,
        "--path",
        "-p",
        help="Directory to inspect (default: current directory)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
) -> None:
    """Show changes under the current folder grouped by subfolder.

    Nothing is staged, committed or pulled.
    """
    _setup_logging(verbose=verbose, quiet=False)
    start_dir = _validate_start_dir(path)

    try:
        context = require_repo(start_dir)
    except RepositoryNotFoundError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None

    try:
        config = load_config(project_path=context.root)
        records = parse_status(
            context.root, untracked_mode_for(context.subpath, config.untracked_files)
        )
    except ConfigError as e:
        _error(f"Config error: {e}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from None
    except GitCommandError as e:
        _error(f"git status failed: {e.output or e}")
        raise typer.Exit(code=EXIT_ERROR) from None

    ui = SyncUI(console=console)
    ui.banner(f"📁 Repository root: {context.name}")
    ui.banner(f"🧭 Subpath: {context.subpath_display}")
    ui.separator()

    inside, outside = split_by_subpath(records, context.subpath)
    ui.show_groups(group_by_folder(inside, context.subpath))

    if inside:
        staged = "yes" if has_staged(inside) else "no"
        unstaged = "yes" if has_unstaged(inside) else "no"
        console.print(f"Staged changes: {staged}   Unstaged changes: {unstaged}")
    if outside:
        _info(f"{len(outside)} change(s) outside this folder")
