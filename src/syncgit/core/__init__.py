"""Core module for syncgit configuration and errors.

This module provides:
- Configuration models and layered loading via load_config()
- Environment helpers for optional access tokens
- Custom exception hierarchy with SyncGitError as base
"""

from syncgit.core.config import (
    GLOBAL_CONFIG_PATH,
    MAX_CONFIG_SIZE,
    PROJECT_CONFIG_NAME,
    Config,
    ConnectivityConfig,
    PullConfig,
    get_token,
    load_config,
    load_env_file,
)
from syncgit.core.exceptions import (
    ConfigError,
    GitCommandError,
    RepositoryNotFoundError,
    SyncGitError,
)

__all__ = [
    # Config constants
    "GLOBAL_CONFIG_PATH",
    "MAX_CONFIG_SIZE",
    "PROJECT_CONFIG_NAME",
    # Config models
    "Config",
    "ConnectivityConfig",
    "PullConfig",
    # Config functions
    "get_token",
    "load_config",
    "load_env_file",
    # Exceptions
    "ConfigError",
    "GitCommandError",
    "RepositoryNotFoundError",
    "SyncGitError",
]
