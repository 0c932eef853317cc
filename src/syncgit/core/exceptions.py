"""Exception hierarchy for syncgit.

All syncgit errors derive from SyncGitError so the CLI can catch them at a
single boundary and map them to exit codes.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class SyncGitError(Exception):
    """Base exception for all syncgit errors."""

    pass


class ConfigError(SyncGitError):
    """Configuration loading or validation failed.

    Raised when:
    - A config file is not valid YAML or not a mapping
    - A config file exceeds the maximum allowed size
    - Values fail schema validation
    """

    pass


class RepositoryNotFoundError(SyncGitError):
    """No git repository could be resolved from the starting directory.

    Attributes:
        start_dir: Directory the search started from.

    """

    def __init__(self, start_dir: Path) -> None:
        """Initialize with the directory the search started from.

        Args:
            start_dir: Directory the search started from.

        """
        super().__init__(f"No git repository found at or above {start_dir}")
        self.start_dir = start_dir


class GitCommandError(SyncGitError):
    """A git invocation exited with a non-zero status.

    The stderr text is kept verbatim so it can be shown to the user as-is
    (merge conflicts, rejected pushes, etc.).

    Attributes:
        args_list: Git arguments (without the leading ``git -C <root>``).
        returncode: Process exit status.
        stderr: Captured error output, token already redacted.
        stdout: Captured standard output, token already redacted.

    """

    def __init__(
        self,
        args: Sequence[str],
        returncode: int,
        stderr: str = "",
        stdout: str = "",
    ) -> None:
        """Initialize GitCommandError with process details.

        Args:
            args: Git arguments that were run.
            returncode: Process exit status.
            stderr: Captured error output.
            stdout: Captured standard output.

        """
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr
        self.stdout = stdout
        super().__init__(
            f"git {' '.join(self.args_list)} failed with status {returncode}"
        )

    @property
    def output(self) -> str:
        """Everything git printed, stdout first (conflict lines go there)."""
        parts = (self.stdout.strip(), self.stderr.strip())
        return "\n".join(part for part in parts if part)

    @property
    def subcommand(self) -> str:
        """Git subcommand name, skipping ``-c key=value`` prefixes."""
        args = iter(self.args_list)
        for arg in args:
            if arg == "-c":
                next(args, None)
                continue
            if not arg.startswith("-"):
                return arg
        return ""
