"""Command-line entry point for syncgit.

Running ``syncgit`` without a subcommand starts the sync workflow with
default options.
"""

import typer

from syncgit import __version__
from syncgit.cli_utils import console
from syncgit.commands.config import config_command
from syncgit.commands.status import status_command
from syncgit.commands.sync import sync_command

app = typer.Typer(
    name="syncgit",
    help="Guided pull, stage, commit and push from any folder of a git repository",
    add_completion=False,
)

app.command("sync")(sync_command)
app.command("status")(status_command)
app.command("config")(config_command)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"syncgit {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Guided git sync for the folder you are in."""
    if ctx.invoked_subcommand is None:
        sync_command(path=None, no_push=False, yes=False, verbose=False, quiet=False)


if __name__ == "__main__":
    app()
