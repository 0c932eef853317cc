"""Tests for layered configuration loading."""

import os
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from syncgit.core.config import (
    MAX_CONFIG_SIZE,
    PROJECT_CONFIG_NAME,
    Config,
    config_to_yaml,
    get_token,
    load_config,
    load_env_file,
)
from syncgit.core.exceptions import ConfigError


class TestDefaults:
    """Tests for built-in defaults."""

    def test_defaults_without_files(self, tmp_path: Path) -> None:
        config = load_config(project_path=tmp_path, global_config_path=tmp_path / "none.yaml")

        assert config == Config()
        assert config.remote == "origin"
        assert config.untracked_files == "all"
        assert config.pull.strategy == "merge"
        assert config.connectivity.host == "8.8.8.8"
        assert config.connectivity.port == 53
        assert config.connectivity.timeout == 3.0

    def test_config_is_frozen(self) -> None:
        config = Config()

        with pytest.raises(ValidationError):
            config.remote = "upstream"  # type: ignore[misc]


class TestLayering:
    """Tests for global + project merging."""

    def test_project_overrides_global_key_by_key(self, tmp_path: Path) -> None:
        global_file = tmp_path / "global.yaml"
        global_file.write_text(
            "pull:\n  strategy: rebase\n  autostash: true\nconnectivity:\n  timeout: 5\n"
        )
        project = tmp_path / "repo"
        project.mkdir()
        (project / PROJECT_CONFIG_NAME).write_text("pull:\n  autostash: false\n")

        config = load_config(project_path=project, global_config_path=global_file)

        assert config.pull.strategy == "rebase"
        assert config.pull.autostash is False
        assert config.connectivity.timeout == 5.0

    def test_empty_file_is_allowed(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text("")

        config = load_config(project_path=tmp_path, global_config_path=tmp_path / "none")

        assert config == Config()

    def test_uses_patched_global_path_by_default(
        self, tmp_path: Path, isolate_global_config: Path
    ) -> None:
        isolate_global_config.parent.mkdir(parents=True, exist_ok=True)
        isolate_global_config.write_text("remote: upstream\n")

        assert load_config().remote == "upstream"


class TestErrors:
    """Tests for ConfigError conditions."""

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text("pull: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(project_path=tmp_path, global_config_path=tmp_path / "none")

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_config(project_path=tmp_path, global_config_path=tmp_path / "none")

    def test_unknown_key_rejected(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text("colour: blue\n")

        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(project_path=tmp_path, global_config_path=tmp_path / "none")

    def test_invalid_value_rejected(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text("pull:\n  strategy: octopus\n")

        with pytest.raises(ConfigError):
            load_config(project_path=tmp_path, global_config_path=tmp_path / "none")

    def test_oversized_file(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text("#" * (MAX_CONFIG_SIZE + 1))

        with pytest.raises(ConfigError, match="exceeds limit"):
            load_config(project_path=tmp_path, global_config_path=tmp_path / "none")


class TestEnvironment:
    """Tests for .env loading and token lookup."""

    def test_get_token_first_non_blank(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "   ")
        monkeypatch.setenv("GH_TOKEN", "gh-value")
        monkeypatch.setenv("GIT_TOKEN", "git-value")

        assert get_token() == "gh-value"

    def test_get_token_none(self) -> None:
        assert get_token() is None

    def test_get_token_custom_vars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_FORGE_TOKEN", "abc")

        assert get_token(("MY_FORGE_TOKEN",)) == "abc"

    def test_load_env_file_does_not_override(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GH_TOKEN", "from-shell")
        monkeypatch.delenv("SYNCGIT_TEST_VAR", raising=False)
        (tmp_path / ".env").write_text('GH_TOKEN=from-file\nSYNCGIT_TEST_VAR="quoted value"\n')

        assert load_env_file(tmp_path) is True
        assert os.environ["GH_TOKEN"] == "from-shell"
        assert os.environ["SYNCGIT_TEST_VAR"] == "quoted value"

        monkeypatch.delenv("SYNCGIT_TEST_VAR", raising=False)

    def test_load_env_file_missing(self, tmp_path: Path) -> None:
        assert load_env_file(tmp_path) is False


class TestConfigToYaml:
    """Tests for YAML rendering."""

    def test_round_trips_through_yaml(self) -> None:
        rendered = yaml.safe_load(config_to_yaml(Config()))

        assert rendered["remote"] == "origin"
        assert rendered["pull"] == {"strategy": "merge", "autostash": False}
        assert rendered["token_env_vars"] == ["GITHUB_TOKEN", "GH_TOKEN", "GIT_TOKEN"]
