"""Subprocess seam for all git invocations.

Every call runs as ``git -C <root> <args...>`` so the process working
directory never matters. Output is captured in full before returning.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from syncgit.core.exceptions import GitCommandError
from syncgit.git.auth import redact

logger = logging.getLogger(__name__)

GIT_BINARY = "git"


@dataclass(frozen=True)
class GitResult:
    """Captured result of one git invocation.

    Attributes:
        args: Git arguments (after ``-C <root>``), token redacted.
        returncode: Process exit status.
        stdout: Standard output.
        stderr: Standard error.

    """

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        """True when git exited with status 0."""
        return self.returncode == 0


def run_git(
    root: Path,
    args: Sequence[str],
    *,
    check: bool = True,
    secret: str | None = None,
) -> GitResult:
    """Run git pinned to a repository root.

    Args:
        root: Repository root passed via ``-C``.
        args: Git arguments, e.g. ``["status", "--porcelain=v1"]``.
        check: Raise GitCommandError on a non-zero exit status.
        secret: Value to redact from logged args and captured output.

    Returns:
        GitResult with captured output.

    Raises:
        GitCommandError: If check is True and git fails, or if the git
            binary cannot be executed.

    """
    cmd = [GIT_BINARY, "-C", str(root), *args]
    shown = tuple(redact(arg, secret) for arg in args)
    logger.debug("Running: git %s (root=%s)", " ".join(shown), root)

    try:
        completed = subprocess.run(
            cmd,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise GitCommandError(shown, -1, stderr=f"Failed to execute git: {e}") from e

    result = GitResult(
        args=shown,
        returncode=completed.returncode,
        stdout=redact(completed.stdout, secret),
        stderr=redact(completed.stderr, secret),
    )

    if result.ok:
        logger.debug("git %s -> ok", shown[0] if shown else "")
    else:
        logger.debug(
            "git %s -> exit %d: %s", " ".join(shown), result.returncode, result.stderr.strip()
        )
        if check:
            raise GitCommandError(shown, result.returncode, result.stderr, result.stdout)

    return result
