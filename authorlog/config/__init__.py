"""Configuration management.

Config is loaded lazily on first use and cached for the process:
    from authorlog.config import get_config

The file location comes from AUTHORLOG_CONFIG_PATH (default
~/.authorlog/authorlog.yml). A .env file is honored via AUTHORLOG_ENV_PATH.
"""

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from authorlog.config.loader import load_authorlog_config, load_config
from authorlog.config.schema import AuthorlogConfig, BatchConfig, TranscriptConfig
from authorlog.constants import DEFAULT_CONFIG_PATH, ENV_CONFIG_PATH, ENV_DOTENV_PATH

__all__ = [
    "AuthorlogConfig",
    "BatchConfig",
    "TranscriptConfig",
    "get_config",
    "load_config",
    "reset_config_cache",
]


def _config_path() -> Path:
    return Path(os.getenv(ENV_CONFIG_PATH) or DEFAULT_CONFIG_PATH).expanduser()


@lru_cache(maxsize=1)
def get_config() -> AuthorlogConfig:
    """Return the process-wide configuration (loaded once)."""
    env_path = os.getenv(ENV_DOTENV_PATH)
    if env_path:
        load_dotenv(Path(env_path).expanduser())
    return load_authorlog_config(_config_path())


def reset_config_cache() -> None:
    """Drop the cached configuration so the next get_config() reloads it."""
    get_config.cache_clear()
