"""Configuration models and loading for syncgit.

Configuration is layered, later sources win:

1. Built-in defaults (the Config model field defaults)
2. Global file: ~/.syncgit/config.yaml
3. Project file: <repository root>/.syncgit.yaml

Nested sections are deep-merged, so a project file may override a single
key (e.g. ``pull.strategy``) without restating the whole section.

Usage:
    from syncgit.core.config import load_config

    config = load_config(project_path=repo_root)
    print(config.pull.strategy)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Final, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from syncgit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

GLOBAL_CONFIG_PATH: Final[Path] = Path.home() / ".syncgit" / "config.yaml"
PROJECT_CONFIG_NAME: Final[str] = ".syncgit.yaml"
ENV_FILE_NAME: Final[str] = ".env"

# Config files are tiny; anything larger is almost certainly a mistake
MAX_CONFIG_SIZE: Final[int] = 64 * 1024

DEFAULT_TOKEN_ENV_VARS: Final[tuple[str, ...]] = ("GITHUB_TOKEN", "GH_TOKEN", "GIT_TOKEN")


class ConnectivityConfig(BaseModel):
    """Reachability probe target used before network operations.

    Attributes:
        host: Host to open a TCP connection to.
        port: TCP port on that host.
        timeout: Connect timeout in seconds.

    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    host: str = "8.8.8.8"
    port: int = Field(default=53, ge=1, le=65535)
    timeout: float = Field(default=3.0, gt=0)


class PullConfig(BaseModel):
    """How remote changes are integrated.

    Attributes:
        strategy: "merge" runs a plain ``git pull``; "rebase" adds ``--rebase``.
        autostash: Pass ``--autostash`` when rebasing.

    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    strategy: Literal["merge", "rebase"] = "merge"
    autostash: bool = False


class Config(BaseModel):
    """Effective syncgit configuration.

    Attributes:
        remote: Remote used when a branch has no upstream yet.
        untracked_files: Value for ``git status --untracked-files``.
        token_env_vars: Environment variables searched for an access token.
        stage_chunk_size: Maximum paths per ``git add`` invocation.
        pull: Pull behavior.
        connectivity: Reachability probe settings.

    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    remote: str = "origin"
    untracked_files: Literal["all", "normal", "no"] = "all"
    token_env_vars: tuple[str, ...] = DEFAULT_TOKEN_ENV_VARS
    stage_chunk_size: int = Field(default=100, ge=1)
    pull: PullConfig = Field(default_factory=PullConfig)
    connectivity: ConnectivityConfig = Field(default_factory=ConnectivityConfig)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base, recursing into nested dicts."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file into a dict.

    Args:
        path: File to read.

    Returns:
        Parsed mapping (empty dict for an empty file).

    Raises:
        ConfigError: If the file is too large, unreadable, not valid YAML,
            or its top level is not a mapping.

    """
    try:
        size = path.stat().st_size
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if size > MAX_CONFIG_SIZE:
        raise ConfigError(
            f"Config file {path} is {size} bytes, exceeds limit of {MAX_CONFIG_SIZE}"
        )

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {path} must contain a mapping, got {type(data).__name__}"
        )
    return data


def load_config(
    project_path: Path | None = None,
    global_config_path: Path | None = None,
) -> Config:
    """Load the effective configuration.

    Args:
        project_path: Repository root; its .syncgit.yaml is applied last.
        global_config_path: Override for the global config location.

    Returns:
        Validated Config instance.

    Raises:
        ConfigError: If any present file is invalid.

    """
    global_path = global_config_path if global_config_path is not None else GLOBAL_CONFIG_PATH
    data: dict[str, Any] = {}

    if global_path.is_file():
        logger.debug("Loading global config: %s", global_path)
        data = _deep_merge(data, _load_yaml_file(global_path))

    if project_path is not None:
        project_file = project_path / PROJECT_CONFIG_NAME
        if project_file.is_file():
            logger.debug("Loading project config: %s", project_file)
            data = _deep_merge(data, _load_yaml_file(project_file))

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_env_file(project_path: Path) -> bool:
    """Load <project>/.env into the process environment.

    Existing environment variables are never overridden.

    Args:
        project_path: Directory containing the .env file.

    Returns:
        True if a .env file was found and processed.

    """
    env_path = project_path / ENV_FILE_NAME
    if not env_path.is_file():
        return False

    load_dotenv(env_path, override=False)
    logger.debug("Loaded environment from %s", env_path)
    return True


def get_token(env_vars: tuple[str, ...] = DEFAULT_TOKEN_ENV_VARS) -> str | None:
    """Return the first non-blank token found in the given variables."""
    for name in env_vars:
        value = os.environ.get(name, "").strip()
        if value:
            logger.debug("Using access token from $%s", name)
            return value
    return None


def config_to_yaml(config: Config) -> str:
    """Render a Config as YAML for display."""
    data = config.model_dump(mode="json")
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)
