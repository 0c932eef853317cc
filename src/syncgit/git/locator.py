"""Repository boundary detection.

Walks upward from a starting directory to the nearest ``.git`` marker and
expresses the starting directory relative to that root. When no ancestor
is a repository, immediate child repositories can be offered instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from syncgit.core.exceptions import RepositoryNotFoundError
from syncgit.git.runner import run_git

logger = logging.getLogger(__name__)

GIT_MARKER = ".git"


@dataclass(frozen=True)
class RepoContext:
    """Resolved repository root and the caller's position inside it.

    Attributes:
        root: Absolute repository root (directory holding .git).
        subpath: Caller directory relative to root, POSIX style, "" at root.
        name: Display name of the repository.

    """

    root: Path
    subpath: str
    name: str

    @property
    def subpath_display(self) -> str:
        """Subpath for humans: ". (repo root)" when at the root."""
        return self.subpath or ". (repo root)"


def _has_marker(directory: Path) -> bool:
    # .git is a directory normally, a file for worktrees and submodules
    return (directory / GIT_MARKER).exists()


def find_repo_root(start_dir: Path) -> Path | None:
    """Return the nearest directory at or above start_dir holding .git."""
    current = start_dir.resolve()
    for candidate in (current, *current.parents):
        if _has_marker(candidate):
            return candidate
    return None


def compute_subpath(root: Path, start_dir: Path) -> str:
    """Express start_dir relative to root as a POSIX path ("" at root)."""
    relative = start_dir.resolve().relative_to(root.resolve())
    subpath = relative.as_posix()
    return "" if subpath == "." else subpath


def parse_repo_name_from_url(url: str) -> str | None:
    """Extract the repository name from a remote URL.

    Examples:
        >>> parse_repo_name_from_url("git@github.com:acme/widgets.git")
        'widgets'
        >>> parse_repo_name_from_url("https://github.com/acme/widgets")
        'widgets'

    """
    trimmed = url.strip().rstrip("/")
    if trimmed.endswith(".git"):
        trimmed = trimmed[: -len(".git")]
    name = trimmed.replace(":", "/").rsplit("/", 1)[-1]
    return name or None


def repo_name(root: Path) -> str:
    """Repository display name from remote.origin.url, else the folder name."""
    result = run_git(root, ["config", "--get", "remote.origin.url"], check=False)
    if result.ok and result.stdout.strip():
        name = parse_repo_name_from_url(result.stdout)
        if name:
            return name
    return root.name


def locate(start_dir: Path) -> RepoContext | None:
    """Resolve the repository containing start_dir.

    Args:
        start_dir: Directory the user ran the tool from.

    Returns:
        RepoContext, or None when no ancestor holds a .git marker.

    """
    root = find_repo_root(start_dir)
    if root is None:
        logger.debug("No %s marker at or above %s", GIT_MARKER, start_dir)
        return None

    subpath = compute_subpath(root, start_dir)
    logger.debug("Repository root %s, subpath %r", root, subpath)
    return RepoContext(root=root, subpath=subpath, name=repo_name(root))


def require_repo(start_dir: Path) -> RepoContext:
    """Like locate(), but raise when there is no repository.

    Raises:
        RepositoryNotFoundError: If no ancestor of start_dir holds .git.

    """
    context = locate(start_dir)
    if context is None:
        raise RepositoryNotFoundError(start_dir)
    return context


def context_for_root(root: Path) -> RepoContext:
    """Build a RepoContext for a known repository root (subpath "")."""
    resolved = root.resolve()
    return RepoContext(root=resolved, subpath="", name=repo_name(resolved))


def discover_child_repos(start_dir: Path) -> list[Path]:
    """List immediate child directories of start_dir that are repositories.

    Hidden directories are skipped. Results are sorted by name.
    """
    try:
        children = sorted(p for p in start_dir.iterdir() if p.is_dir())
    except OSError as e:
        logger.warning("Cannot list %s: %s", start_dir, e)
        return []

    return [
        child.resolve()
        for child in children
        if not child.name.startswith(".") and _has_marker(child)
    ]
