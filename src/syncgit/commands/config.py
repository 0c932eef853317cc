"""Config command for syncgit CLI.

Prints the effective configuration after merging global and project files.
"""

import typer

from syncgit.cli_utils import (
    EXIT_CONFIG_ERROR,
    _error,
    _validate_start_dir,
    console,
)
from syncgit.core.config import (
    GLOBAL_CONFIG_PATH,
    PROJECT_CONFIG_NAME,
    config_to_yaml,
    get_token,
    load_config,
)
from syncgit.core.exceptions import ConfigError
from syncgit.git import find_repo_root


def config_command(
    path: str = typer.Option(
        None,
        "--path",
        "-p",
        help="Directory whose repository config is shown (default: current directory)",
    ),
) -> None:
    """Show the effective configuration as YAML.

    The access token itself is never printed, only whether one was found.
    """
    start_dir = _validate_start_dir(path)
    root = find_repo_root(start_dir)

    try:
        config = load_config(project_path=root)
    except ConfigError as e:
        _error(f"Config error: {e}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from None

    console.print(f"[dim]Global config:[/dim] {GLOBAL_CONFIG_PATH}")
    if root is not None:
        console.print(f"[dim]Project config:[/dim] {root / PROJECT_CONFIG_NAME}")
    console.print()
    console.print(config_to_yaml(config), markup=False, highlight=False)

    token_state = "found" if get_token(config.token_env_vars) else "not set"
    console.print(f"[dim]Access token:[/dim] {token_state}")
