"""Terminal presentation and prompts for the sync workflow.

All user-facing output of the workflow goes through SyncUI so the
orchestrator stays free of rendering concerns and can be driven by a
scripted UI in tests.

Key bindings in the commit message prompt:
- Enter - submit the message
- Ctrl+U - clear the line
- Ctrl+C - abort (staged changes are left in place)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from prompt_toolkit import PromptSession
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.text import Text

from syncgit.core.exceptions import GitCommandError
from syncgit.git.grouping import DIRECT_GROUP
from syncgit.git.status import ChangeRecord

logger = logging.getLogger(__name__)

DIRECT_GROUP_LABEL = "(this folder)"


class SyncUI:
    """Rich-based console UI for the sync workflow.

    Attributes:
        console: Rich console used for all output.
        assume_yes: Auto-confirm pauses and yes/no questions.

    """

    def __init__(self, console: Console | None = None, assume_yes: bool = False) -> None:
        self.console = console or Console()
        self.assume_yes = assume_yes
        self._session: PromptSession[str] | None = None

    # -- output ----------------------------------------------------------

    def separator(self) -> None:
        self.console.rule(style="dim")

    def banner(self, text: str) -> None:
        self.console.print(text, justify="center")

    def info(self, text: str) -> None:
        self.console.print(f"[blue]ℹ[/blue]  {text}", justify="center")

    def success(self, text: str) -> None:
        self.console.print(f"[green]✓[/green] {text}", justify="center")

    def warning(self, text: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow]  {text}", justify="center")

    def error(self, text: str) -> None:
        self.console.print(f"[red]✗[/red] {text}", justify="center")

    def show_output(self, text: str) -> None:
        """Print tool output verbatim (no markup, no highlighting)."""
        stripped = text.rstrip()
        if stripped:
            self.console.print(Text(stripped), highlight=False)

    def git_error(self, err: GitCommandError) -> None:
        self.error(f"git {err.subcommand} failed (exit {err.returncode})")
        self.show_output(err.output or str(err))

    def show_groups(self, groups: dict[str, list[ChangeRecord]]) -> None:
        """Render grouped changes, one block per top-level folder."""
        if not groups:
            self.success("No changes in current subpath")
            return

        for name, records in groups.items():
            label = DIRECT_GROUP_LABEL if name == DIRECT_GROUP else name
            self.banner(f"📁 {label}")
            for record in records:
                self.console.print(Text(str(record)), highlight=False)
            self.separator()

    # -- input -----------------------------------------------------------

    def confirm(self, question: str, default: bool = False) -> bool:
        if self.assume_yes:
            self.console.print(f"❓ {question} [dim](auto: yes)[/dim]")
            return True
        return Confirm.ask(f"❓ {question}", default=default, console=self.console)

    def pause(self, message: str) -> None:
        """Wait for Enter. Ctrl+C raises KeyboardInterrupt to the caller."""
        if self.assume_yes:
            return
        self.console.input(f"\n{message} ")

    def choose_repository(self, candidates: list[Path]) -> Path | None:
        """Let the user pick one of several repositories, None to quit."""
        self.banner("Repositories in this folder:")
        for index, path in enumerate(candidates, start=1):
            self.console.print(f"  [cyan]{index}[/cyan]. {path.name}")

        choices = [str(i) for i in range(1, len(candidates) + 1)] + ["q"]
        answer = Prompt.ask(
            "Select a repository", choices=choices, default="1", console=self.console
        )
        if answer == "q":
            return None
        return candidates[int(answer) - 1]

    def _get_session(self) -> PromptSession[str]:
        """Get or create the prompt session with key bindings."""
        if self._session is None:
            bindings = KeyBindings()

            @bindings.add("c-u")
            def clear_buffer(event: KeyPressEvent) -> None:
                """Clear all text with Ctrl+U (Unix standard clear-line)."""
                event.app.current_buffer.text = ""

            self._session = PromptSession(key_bindings=bindings)

        return self._session

    def ask_commit_message(self) -> str:
        """Read one commit message line. May return an empty string."""
        label = "✏️  Commit message: "
        if sys.stdin.isatty():
            return self._get_session().prompt(label)
        # Piped input: prompt_toolkit needs a terminal
        return self.console.input(label)
