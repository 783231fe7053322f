"""Platform path helpers."""

from .paths import (
    clear_caches,
    home,
    store_root,
    user_config_dir,
    user_config_file,
)

__all__ = [
    "clear_caches",
    "home",
    "store_root",
    "user_config_dir",
    "user_config_file",
]
