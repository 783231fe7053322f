"""User-level directories: home, config dir and the cache store root."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from binrc.core.config import DEFAULT_STORE_PATH

__all__ = [
    "home",
    "user_config_dir",
    "user_config_file",
    "store_root",
    "clear_caches",
]

# Application name used for directory naming
APP_NAME = "binrc"


@lru_cache(maxsize=1)
def home() -> Path:
    """Get the user's home directory.

    HOME wins so CI and containers can redirect it; Path.home() covers the
    rest.
    """
    home_env = os.environ.get("HOME")
    if home_env:
        return Path(home_env)
    return Path.home()


@lru_cache(maxsize=1)
def user_config_dir() -> Path:
    """Get the user configuration directory (``$XDG_CONFIG_HOME/binrc``)."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME
    return home() / ".config" / APP_NAME


def user_config_file() -> Path:
    return user_config_dir() / "config.toml"


def store_root(value: str | None = None) -> Path:
    """Resolve the cache store root.

    Empty means ``~/.binrc``. A relative path is taken relative to the home
    directory, not the working directory, so the same store is found from
    anywhere.

    Args:
        value: Path as given on the command line or in config

    Returns:
        Absolute, normalized store root
    """
    raw = (value or "").strip() or DEFAULT_STORE_PATH
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = home() / path
    return Path(os.path.normpath(path))


def clear_caches() -> None:
    """Clear cached directories (for tests that change the environment)."""
    home.cache_clear()
    user_config_dir.cache_clear()
