"""Typed git operations pinned to one repository root.

GitRepository is the only place that knows which git subcommands and flags
the workflow uses. Network commands (pull/push) get the optional token
injected through a per-process URL rewrite.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from syncgit.git.auth import auth_config_args
from syncgit.git.runner import GitResult, run_git
from syncgit.git.status import ChangeRecord, parse_status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AheadBehind:
    """Commit counts relative to the upstream branch.

    Attributes:
        ahead: Local commits not yet pushed.
        behind: Remote commits not yet pulled.

    """

    ahead: int = 0
    behind: int = 0

    @property
    def in_sync(self) -> bool:
        return self.ahead == 0 and self.behind == 0


def _chunks(items: Sequence[str], size: int) -> list[Sequence[str]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


class GitRepository:
    """Git operations for a single working tree.

    Attributes:
        root: Repository root; every command runs as ``git -C <root>``.
        remote: Remote used for pushes without an upstream.

    """

    def __init__(self, root: Path, token: str | None = None, remote: str = "origin") -> None:
        """Initialize the repository wrapper.

        Args:
            root: Repository root directory.
            token: Optional access token for HTTPS remotes.
            remote: Default remote name.

        """
        self.root = root
        self.remote = remote
        self._token = token

    def run(self, args: Sequence[str], *, check: bool = True, auth: bool = False) -> GitResult:
        """Run a git command at the repository root.

        Args:
            args: Git arguments.
            check: Raise GitCommandError on failure.
            auth: Prefix the token URL rewrite (network commands only).

        """
        prefix: list[str] = []
        if auth:
            prefix = auth_config_args(self.remote_url(self.upstream_remote()), self._token)
        return run_git(self.root, [*prefix, *args], check=check, secret=self._token)

    # -- queries ---------------------------------------------------------

    def remote_url(self, remote: str | None = None) -> str | None:
        name = remote or self.remote
        result = run_git(self.root, ["config", "--get", f"remote.{name}.url"], check=False)
        url = result.stdout.strip()
        return url if result.ok and url else None

    def current_branch(self) -> str | None:
        """Checked-out branch name, None on a detached HEAD."""
        result = run_git(self.root, ["symbolic-ref", "--short", "-q", "HEAD"], check=False)
        branch = result.stdout.strip()
        return branch if result.ok and branch else None

    def upstream(self) -> str | None:
        """Upstream ref of the current branch (e.g. "origin/main"), or None."""
        result = run_git(
            self.root,
            ["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"],
            check=False,
        )
        ref = result.stdout.strip()
        return ref if result.ok and ref else None

    def upstream_remote(self) -> str:
        """Remote the current branch tracks, else the configured default."""
        branch = self.current_branch()
        if branch is not None:
            result = run_git(
                self.root, ["config", "--get", f"branch.{branch}.remote"], check=False
            )
            name = result.stdout.strip()
            # "." means the upstream is a local branch
            if result.ok and name and name != ".":
                return name
        return self.remote

    def ahead_behind(self) -> AheadBehind:
        """Count commits ahead of / behind the upstream.

        Returns AheadBehind(0, 0) when there is no upstream or the counts
        cannot be read.
        """
        if self.upstream() is None:
            return AheadBehind()

        result = run_git(
            self.root, ["rev-list", "--left-right", "--count", "HEAD...@{u}"], check=False
        )
        parts = result.stdout.split()
        if not result.ok or len(parts) != 2:
            logger.debug("Unexpected rev-list output: %r", result.stdout)
            return AheadBehind()
        try:
            return AheadBehind(ahead=int(parts[0]), behind=int(parts[1]))
        except ValueError:
            return AheadBehind()

    def incoming_log(self, limit: int = 5) -> str:
        """One-line summaries of the newest upstream commits not in HEAD."""
        result = run_git(
            self.root, ["log", "--oneline", "-n", str(limit), "HEAD..@{u}"], check=False
        )
        return result.stdout if result.ok else ""

    def short_status(self) -> str:
        """``git status -sb`` exactly as git formats it."""
        return self.run(["status", "-sb"]).stdout

    def status(self, untracked_files: str = "all") -> list[ChangeRecord]:
        return parse_status(self.root, untracked_files)

    def unmerged_paths(self) -> list[str]:
        result = self.run(["diff", "--name-only", "--diff-filter=U"])
        return [line for line in result.stdout.splitlines() if line]

    def merge_in_progress(self) -> bool:
        result = run_git(self.root, ["rev-parse", "-q", "--verify", "MERGE_HEAD"], check=False)
        return result.ok

    def stash_count(self) -> int:
        result = self.run(["stash", "list"])
        return len([line for line in result.stdout.splitlines() if line])

    def staged_diff_stat(self) -> str:
        return self.run(["diff", "--cached", "--stat"]).stdout

    # -- mutations -------------------------------------------------------

    def pull(self, strategy: str = "merge", autostash: bool = False) -> GitResult:
        """Pull from the upstream.

        Raises:
            GitCommandError: On conflicts or any other pull failure.

        """
        args = ["pull"]
        if strategy == "rebase":
            args.append("--rebase")
            if autostash:
                args.append("--autostash")
        else:
            # Explicit, so git never stops on an unset pull.rebase
            args.append("--no-rebase")
        return self.run(args, auth=True)

    def push(self, set_upstream: bool = False) -> GitResult:
        """Push the current branch.

        Args:
            set_upstream: Push HEAD to the default remote and record it as
                upstream (for branches that have none yet).

        Raises:
            GitCommandError: If the push is rejected or fails.

        """
        args = ["push"]
        if set_upstream:
            args += ["--set-upstream", self.remote, "HEAD"]
        return self.run(args, auth=True)

    def stage(self, paths: Sequence[str], chunk_size: int = 100) -> None:
        """Stage exactly the given paths.

        Paths are passed after ``--`` in chunks to keep command lines short.
        Staging an already staged path is a no-op.

        Raises:
            GitCommandError: If git add fails.

        """
        unique = list(dict.fromkeys(paths))
        for chunk in _chunks(unique, chunk_size):
            self.run(["add", "--", *chunk])
        logger.debug("Staged %d path(s)", len(unique))

    def commit(self, message: str) -> GitResult:
        """Commit the index with message.

        Raises:
            GitCommandError: If the commit fails (hooks, nothing staged, ...).

        """
        return self.run(["commit", "-m", message])
