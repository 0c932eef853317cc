"""Pytest configuration and fixtures for syncgit tests."""

import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

from syncgit.core.config import DEFAULT_TOKEN_ENV_VARS


@pytest.fixture(autouse=True)
def clear_token_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove access tokens from the environment.

    Prevents a developer's real GITHUB_TOKEN from leaking into tests.
    Tests that need a token set it explicitly with monkeypatch.setenv.
    """
    for name in DEFAULT_TOKEN_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def isolate_global_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch) -> Path:
    """Point the global config path at an empty temp location."""
    fake = tmp_path_factory.mktemp("home") / ".syncgit" / "config.yaml"
    monkeypatch.setattr("syncgit.core.config.GLOBAL_CONFIG_PATH", fake)
    return fake


def _git(cwd: Path, *args: str) -> str:
    """Run git in cwd for test setup, returning stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


@pytest.fixture
def make_repo(tmp_path: Path) -> Callable[..., Path]:
    """Factory creating real git repositories with one initial commit.

    Usage:
        def test_something(make_repo):
            repo = make_repo("work")
            (repo / "a.txt").write_text("x")
    """

    def _make(name: str = "repo", initial_files: dict[str, str] | None = None) -> Path:
        root = tmp_path / name
        root.mkdir(parents=True)
        _git(root, "init", "-q", "-b", "main")
        _git(root, "config", "user.email", "dev@example.com")
        _git(root, "config", "user.name", "Dev")
        _git(root, "config", "commit.gpgsign", "false")
        files = initial_files or {"README.md": "hello\n"}
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        _git(root, "add", "-A")
        _git(root, "commit", "-q", "-m", "initial")
        return root

    return _make


@pytest.fixture
def cloned_pair(tmp_path: Path, make_repo: Callable[..., Path]) -> tuple[Path, Path, Path]:
    """A bare remote with two clones ("work" and "other") tracking main.

    Returns:
        (remote, work, other) paths.

    """
    seed = make_repo("seed", {"README.md": "hello\n", "src/app.txt": "v1\n"})
    remote = tmp_path / "remote.git"
    _git(tmp_path, "clone", "-q", "--bare", str(seed), str(remote))

    clones = []
    for name in ("work", "other"):
        clone = tmp_path / name
        _git(tmp_path, "clone", "-q", str(remote), str(clone))
        _git(clone, "config", "user.email", f"{name}@example.com")
        _git(clone, "config", "user.name", name)
        _git(clone, "config", "commit.gpgsign", "false")
        _git(clone, "config", "pull.rebase", "false")
        clones.append(clone)

    return remote, clones[0], clones[1]


@pytest.fixture
def git_cmd() -> Callable[..., str]:
    """Helper running git in a directory for test setup: git_cmd(cwd, *args)."""
    return _git
