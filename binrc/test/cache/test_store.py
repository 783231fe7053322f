"""Tests for cache/store.py - store layout and existence checks."""

from pathlib import Path

from binrc.cache.project import Project, ProjectResolver
from binrc.cache.store import CacheStore, target_path
from binrc.cache.templates import TemplateTable
from binrc.core.result import Ok


def project(identifier: str = "spf13/hugo", version: str = "0.68.3") -> Project:
    result = ProjectResolver(TemplateTable(), {}, {}).resolve(identifier, version)
    assert isinstance(result, Ok)
    return result.value


class TestTargetPath:
    """Tests for the deterministic layout."""

    def test_layout(self, tmp_path: Path) -> None:
        assert target_path(tmp_path, project()) == (
            tmp_path / "binaries" / "spf13" / "hugo" / "v0.68.3" / "hugo"
        )

    def test_uses_v_prefixed_version(self, tmp_path: Path) -> None:
        assert target_path(tmp_path, project(version="v1.0")).parent.name == "v1.0"
        assert target_path(tmp_path, project(version="1.0")).parent.name == "v1.0"

    def test_pure(self, tmp_path: Path) -> None:
        """Computing a path creates nothing."""
        target_path(tmp_path / "store", project())
        assert not (tmp_path / "store").exists()

    def test_store_delegates(self, tmp_path: Path) -> None:
        store = CacheStore(tmp_path)
        assert store.root == tmp_path
        assert store.binary_path(project()) == target_path(tmp_path, project())


class TestExists:
    """Tests for the cache-hit check."""

    def test_missing(self, tmp_path: Path) -> None:
        assert CacheStore(tmp_path).exists(tmp_path / "nope") is False

    def test_executable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "tool"
        path.write_bytes(b"#!/bin/sh\n")
        path.chmod(0o755)

        store = CacheStore(tmp_path)
        assert store.exists(path) is True
        assert store.is_executable(path) is True

    def test_non_executable_file_is_still_a_hit(self, tmp_path: Path) -> None:
        path = tmp_path / "tool"
        path.write_bytes(b"data")
        path.chmod(0o644)

        store = CacheStore(tmp_path)
        assert store.exists(path) is True
        assert store.is_executable(path) is False

    def test_directory_is_not_a_hit(self, tmp_path: Path) -> None:
        (tmp_path / "tool").mkdir()
        assert CacheStore(tmp_path).exists(tmp_path / "tool") is False
