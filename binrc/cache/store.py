"""On-disk layout of cached binaries.

A cached binary lives at ``{root}/binaries/{owner}/{name}/{version}/{name}``.
There is no index: a regular file at that path is the cache entry.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .project import Project

__all__ = ["CacheStore", "target_path"]


def target_path(store_root: Path, project: Project) -> Path:
    """Deterministic binary path for ``project`` under ``store_root``."""
    return store_root / "binaries" / project.owner / project.name / project.version / project.name


class CacheStore:
    """Maps projects to binary paths and checks for them.

    Usage:
        store = CacheStore(Path.home() / ".binrc")
        path = store.binary_path(project)
        if store.exists(path):
            ...
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def binary_path(self, project: Project) -> Path:
        return target_path(self._root, project)

    def exists(self, path: Path) -> bool:
        """Check for a cache hit.

        A regular file counts as a hit even without the executable bit;
        permissions are left for the user to fix.
        """
        return path.is_file()

    def is_executable(self, path: Path) -> bool:
        return os.access(path, os.X_OK)
