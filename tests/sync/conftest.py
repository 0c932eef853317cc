"""Pytest fixtures for sync workflow tests.

Provides a scripted UI (real rendering into a string buffer, canned
answers for prompts), a fake repository recording every call, and a
switchable connectivity probe.
"""

from __future__ import annotations

import io
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest
from rich.console import Console

from syncgit.core.config import Config
from syncgit.core.exceptions import GitCommandError
from syncgit.git.repository import AheadBehind
from syncgit.git.runner import GitResult
from syncgit.git.status import ChangeRecord, parse_status_lines
from syncgit.sync import SyncOrchestrator, SyncUI


class ScriptedUI(SyncUI):
    """SyncUI with canned answers and output captured in memory."""

    def __init__(
        self,
        confirms: list[bool] | None = None,
        messages: list[str | BaseException] | None = None,
        chosen_repo: Path | None = None,
    ) -> None:
        self.buffer = io.StringIO()
        super().__init__(console=Console(file=self.buffer, width=120, color_system=None))
        self.confirms = list(confirms or [])
        self.messages = list(messages or [])
        self.chosen_repo = chosen_repo
        self.pauses: list[str] = []
        self.questions: list[str] = []
        self.offered_repos: list[Path] = []

    @property
    def output(self) -> str:
        return self.buffer.getvalue()

    def confirm(self, question: str, default: bool = False) -> bool:
        self.questions.append(question)
        return self.confirms.pop(0) if self.confirms else default

    def pause(self, message: str) -> None:
        self.pauses.append(message)

    def choose_repository(self, candidates: list[Path]) -> Path | None:
        self.offered_repos = list(candidates)
        return self.chosen_repo

    def ask_commit_message(self) -> str:
        answer = self.messages.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer


class FakeProbe:
    """Connectivity probe with a fixed answer and a call counter."""

    def __init__(self, online: bool) -> None:
        self.online = online
        self.calls = 0

    def is_online(self) -> bool:
        self.calls += 1
        return self.online


def _result(stdout: str = "", stderr: str = "") -> GitResult:
    return GitResult(args=(), returncode=0, stdout=stdout, stderr=stderr)


class FakeRepository:
    """In-memory stand-in for GitRepository.

    Attributes:
        calls: Ordered log of pull, push, status, stage and commit calls.
        staged: Every path passed to stage().
        commits: Commit messages in order.
        pushes: set_upstream flag of each push attempt.
        untracked_modes: --untracked-files value of each status call.

    """

    def __init__(
        self,
        statuses: list[list[str]] | None = None,
        upstream: str | None = "origin/main",
        counts: AheadBehind | None = None,
        unmerged: list[str] | None = None,
        merging: bool = False,
        stashed: int = 0,
        pull_error: GitCommandError | None = None,
        push_errors: list[GitCommandError | None] | None = None,
    ) -> None:
        self._statuses = [parse_status_lines(lines) for lines in (statuses or [[]])]
        self._upstream = upstream
        self._counts = counts or AheadBehind()
        self._unmerged = unmerged or []
        self._merging = merging
        self._stashed = stashed
        self._pull_error = pull_error
        self._push_errors = list(push_errors or [])
        self.calls: list[object] = []
        self.staged: list[str] = []
        self.commits: list[str] = []
        self.pushes: list[bool] = []
        self.untracked_modes: list[str] = []

    def short_status(self) -> str:
        return "## main...origin/main\n"

    def unmerged_paths(self) -> list[str]:
        return self._unmerged

    def merge_in_progress(self) -> bool:
        return self._merging

    def stash_count(self) -> int:
        return self._stashed

    def ahead_behind(self) -> AheadBehind:
        return self._counts

    def upstream(self) -> str | None:
        return self._upstream

    def incoming_log(self, limit: int = 5) -> str:
        return "f00dbee Fix remote bug\n" if self._counts.behind else ""

    def pull(self, strategy: str = "merge", autostash: bool = False) -> GitResult:
        self.calls.append("pull")
        if self._pull_error is not None:
            raise self._pull_error
        return _result("Already up to date.\n")

    def push(self, set_upstream: bool = False) -> GitResult:
        self.calls.append("push")
        self.pushes.append(set_upstream)
        error = self._push_errors.pop(0) if self._push_errors else None
        if error is not None:
            raise error
        return _result(stderr="To origin\n   abc..def  main -> main\n")

    def status(self, untracked_files: str = "all") -> list[ChangeRecord]:
        self.calls.append("status")
        self.untracked_modes.append(untracked_files)
        if len(self._statuses) > 1:
            return self._statuses.pop(0)
        return self._statuses[0]

    def stage(self, paths, chunk_size: int = 100) -> None:
        self.calls.append("stage")
        self.staged.extend(paths)

    def staged_diff_stat(self) -> str:
        return " 1 file changed, 1 insertion(+)\n"

    def commit(self, message: str) -> GitResult:
        self.calls.append("commit")
        self.commits.append(message)
        return _result("[main abc1234] " + message + "\n")


@pytest.fixture
def repo_tree(tmp_path: Path) -> Path:
    """Fake working tree with .git and a few folders; returns its root."""
    root = tmp_path / "project"
    (root / ".git").mkdir(parents=True)
    (root / "src").mkdir()
    (root / "docs").mkdir()
    return root.resolve()


@pytest.fixture(autouse=True)
def fixed_repo_name():
    """Skip the remote URL lookup in the locator."""
    with patch("syncgit.git.locator.repo_name", return_value="project"):
        yield


@pytest.fixture
def make_orchestrator() -> Callable[..., SyncOrchestrator]:
    """Factory wiring an orchestrator to fakes.

    Usage:
        orchestrator = make_orchestrator(start_dir, ui, repo, online=False)
    """

    def _make(
        start_dir: Path,
        ui: ScriptedUI,
        repo: FakeRepository,
        online: bool = True,
        push: bool = True,
        config: Config | None = None,
    ) -> SyncOrchestrator:
        return SyncOrchestrator(
            start_dir,
            ui=ui,
            config=config or Config(),
            probe=FakeProbe(online),
            repo_factory=lambda root, token=None, remote="origin": repo,
            push=push,
        )

    return _make


@pytest.fixture
def scripted_ui() -> type[ScriptedUI]:
    """The ScriptedUI class, for tests to instantiate with their answers."""
    return ScriptedUI


@pytest.fixture
def fake_repo() -> type[FakeRepository]:
    """The FakeRepository class, for tests to instantiate with their state."""
    return FakeRepository
