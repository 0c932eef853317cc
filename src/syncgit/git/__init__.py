"""Git utilities for syncgit.

Provides:
- Repository boundary detection and child repository discovery
- Porcelain status parsing, subpath filtering and folder grouping
- Typed git operations pinned to a repository root
- Per-invocation token injection for HTTPS remotes
"""

from syncgit.git.auth import auth_config_args, redact
from syncgit.git.grouping import DIRECT_GROUP, group_by_folder
from syncgit.git.locator import (
    RepoContext,
    context_for_root,
    discover_child_repos,
    find_repo_root,
    locate,
    require_repo,
)
from syncgit.git.repository import AheadBehind, GitRepository
from syncgit.git.runner import GitResult, run_git
from syncgit.git.status import (
    ChangeRecord,
    filter_by_subpath,
    has_staged,
    has_unstaged,
    parse_status,
    parse_status_lines,
    split_by_subpath,
    untracked_mode_for,
)

__all__ = [
    # Locator
    "RepoContext",
    "context_for_root",
    "discover_child_repos",
    "find_repo_root",
    "locate",
    "require_repo",
    # Status parsing
    "ChangeRecord",
    "filter_by_subpath",
    "has_staged",
    "has_unstaged",
    "parse_status",
    "parse_status_lines",
    "split_by_subpath",
    "untracked_mode_for",
    # Grouping
    "DIRECT_GROUP",
    "group_by_folder",
    # Operations
    "AheadBehind",
    "GitRepository",
    "GitResult",
    "run_git",
    # Credentials
    "auth_config_args",
    "redact",
]
