"""Tests for cache/cache.py - the resolve/check/download orchestrator."""

import io
import os
import tarfile
from pathlib import Path
from typing import BinaryIO

from binrc.cache.cache import Cache, release_url
from binrc.cache.errors import (
    BinaryNotFoundInArchive,
    CorruptArchive,
    DownloadFailed,
    NoMatchingTemplate,
    UnknownProject,
    UnknownVersion,
)
from binrc.cache.http import HttpClient, HttpError, MockHttpClient
from binrc.cache.installer import STAGING_PREFIX
from binrc.cache.project import ProjectResolver
from binrc.cache.store import CacheStore
from binrc.cache.templates import NamingPattern, TemplateRule, TemplateTable
from binrc.cache.versions import VersionRange
from binrc.core.result import Err, Ok, Result
from binrc.output.console import MockConsole

HUGO_URL = (
    "https://github.com/spf13/hugo/releases/download/v0.68.3/hugo_v0.68.3_Linux-64bit.tar.gz"
)
HUGO_BIN = "hugo_0.68.3_linux_amd64/hugo_0.68.3_linux_amd64"


def tar_gz(files: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(content)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(content))
    return buf.getvalue()


def make_cache(
    root: Path,
    http: HttpClient,
    templates: TemplateTable | None = None,
    console: MockConsole | None = None,
    release_host: str = "github.com",
) -> Cache:
    resolver = ProjectResolver(templates or TemplateTable(), {"hugo": "spf13/hugo"}, {})
    return Cache(
        CacheStore(root),
        resolver,
        http,
        release_host=release_host,
        console=console,
    )


class TimingOutBody(io.BytesIO):
    """Response body that times out once its bytes run out."""

    def read(self, size: int | None = -1, /) -> bytes:
        chunk = super().read(size)
        if not chunk:
            raise TimeoutError("timed out")
        return chunk


class TimingOutHttpClient:
    """Answers every URL with the first ``fail_after`` bytes of ``data``, then times out."""

    def __init__(self, data: bytes, fail_after: int) -> None:
        self._body = data[:fail_after]
        self.calls: list[str] = []

    def open(self, url: str) -> Result[BinaryIO, HttpError]:
        self.calls.append(url)
        return Ok(TimingOutBody(self._body))


def leftover_staging(root: Path) -> list[Path]:
    return [p for p in root.rglob(f"{STAGING_PREFIX}*")]


class TestReleaseUrl:
    """Tests for download URL construction."""

    def test_hugo_scenario(self, tmp_path: Path) -> None:
        cache = make_cache(tmp_path, MockHttpClient())
        project = ProjectResolver(TemplateTable(), {"hugo": "spf13/hugo"}, {}).resolve(
            "hugo", "0.68.3"
        )
        assert isinstance(project, Ok)
        assert cache.download_url(project.value) == HUGO_URL
        assert release_url(project.value, "ghe.example.com").startswith("https://ghe.example.com/")


class TestCacheMiss:
    """Tests for download + install on a miss."""

    def test_install_hugo(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_response(HUGO_URL, tar_gz({HUGO_BIN: b"hugo binary"}))
        cache = make_cache(tmp_path, http)

        result = cache.get_or_install("hugo", "0.68.3")

        assert isinstance(result, Ok)
        expected = tmp_path / "binaries" / "spf13" / "hugo" / "v0.68.3" / "hugo"
        assert result.value.path == expected
        assert expected.read_bytes() == b"hugo binary"
        assert http.calls == [HUGO_URL]
        assert leftover_staging(tmp_path) == []

    def test_then_hit_without_network(self, tmp_path: Path) -> None:
        """Second call is served from the store with no HTTP call."""
        http = MockHttpClient()
        http.set_response(HUGO_URL, tar_gz({HUGO_BIN: b"hugo binary"}))
        cache = make_cache(tmp_path, http)

        first = cache.get_or_install("hugo", "0.68.3")
        second = cache.get_or_install("spf13/hugo", "v0.68.3")

        assert isinstance(first, Ok)
        assert isinstance(second, Ok)
        assert second.value.path == first.value.path
        assert http.calls == [HUGO_URL]

    def test_top_level_binary(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_response(HUGO_URL, tar_gz({"hugo": b"flat", "README.md": b"docs"}))

        result = make_cache(tmp_path, http).get_or_install("hugo", "0.68.3")

        assert isinstance(result, Ok)
        assert result.value.path is not None
        assert result.value.path.read_bytes() == b"flat"

    def test_custom_release_host(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        url = HUGO_URL.replace("github.com", "mirror.local")
        http.set_response(url, tar_gz({"hugo": b"x"}))

        result = make_cache(tmp_path, http, release_host="mirror.local").get_or_install(
            "hugo", "0.68.3"
        )

        assert isinstance(result, Ok)
        assert http.calls == [url]

    def test_status_lines(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_response(HUGO_URL, tar_gz({"hugo": b"x"}))
        console = MockConsole()

        make_cache(tmp_path, http, console=console).get_or_install("hugo", "0.68.3")

        assert console.find(HUGO_URL)
        assert console.find("installed spf13/hugo@v0.68.3")


class TestCacheHit:
    """Tests for the existing-binary short circuit."""

    def test_existing_file_no_network(self, tmp_path: Path) -> None:
        path = tmp_path / "binaries" / "owner" / "tool" / "v1.0" / "tool"
        path.parent.mkdir(parents=True)
        path.write_bytes(b"cached")
        path.chmod(0o755)
        http = MockHttpClient()

        result = make_cache(tmp_path, http).get_or_install("owner/tool", "1.0")

        assert isinstance(result, Ok)
        assert result.value.path == path
        assert http.calls == []

    def test_non_executable_hit_warns(self, tmp_path: Path) -> None:
        path = tmp_path / "binaries" / "owner" / "tool" / "v1.0" / "tool"
        path.parent.mkdir(parents=True)
        path.write_bytes(b"cached")
        path.chmod(0o644)
        http = MockHttpClient()
        console = MockConsole()

        result = make_cache(tmp_path, http, console=console).get_or_install("owner/tool", "1.0")

        assert isinstance(result, Ok)
        assert http.calls == []
        assert console.has_warning()
        assert path.stat().st_mode & 0o777 == 0o644


class TestCacheFailures:
    """Tests for error propagation."""

    def test_unknown_project_no_network(self, tmp_path: Path) -> None:
        http = MockHttpClient()

        result = make_cache(tmp_path, http).get_or_install("nope", "1.0")

        assert isinstance(result, Err)
        assert isinstance(result.error, UnknownProject)
        assert http.calls == []

    def test_unknown_version_no_network(self, tmp_path: Path) -> None:
        http = MockHttpClient()

        result = make_cache(tmp_path, http).get_or_install("owner/tool", "")

        assert result == Err(UnknownVersion(project="owner/tool", env_var="TOOL_VERSION"))
        assert http.calls == []
        assert not (tmp_path / "binaries").exists()

    def test_no_matching_template_no_network(self, tmp_path: Path) -> None:
        old = TemplateRule(
            version_range=VersionRange.parse("<0.16"),
            tarball=NamingPattern("{name}.tar.gz"),
            binary=NamingPattern("{name}"),
        )
        http = MockHttpClient()

        result = make_cache(tmp_path, http, TemplateTable(rules={"hugo": (old,)})).get_or_install(
            "hugo", "0.68.3"
        )

        assert isinstance(result, Err)
        assert isinstance(result.error, NoMatchingTemplate)
        assert http.calls == []

    def test_404(self, tmp_path: Path) -> None:
        http = MockHttpClient()

        result = make_cache(tmp_path, http).get_or_install("hugo", "0.68.3")

        assert result == Err(
            DownloadFailed(
                project="spf13/hugo",
                version="v0.68.3",
                url=HUGO_URL,
                status=404,
                message="Not found (mock)",
            )
        )
        assert not (tmp_path / "binaries" / "spf13" / "hugo" / "v0.68.3" / "hugo").exists()
        assert leftover_staging(tmp_path) == []

    def test_network_error(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_response(HUGO_URL, HttpError(url=HUGO_URL, status=0, message="timed out"))

        result = make_cache(tmp_path, http).get_or_install("hugo", "0.68.3")

        assert isinstance(result, Err)
        assert isinstance(result.error, DownloadFailed)
        assert result.error.status == 0

    def test_corrupt_archive(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_response(HUGO_URL, b"this is not a tarball")

        result = make_cache(tmp_path, http).get_or_install("hugo", "0.68.3")

        assert isinstance(result, Err)
        assert isinstance(result.error, CorruptArchive)
        assert result.error.project == "spf13/hugo"
        assert result.error.url == HUGO_URL
        assert leftover_staging(tmp_path) == []

    def test_binary_missing_then_retry_succeeds(self, tmp_path: Path) -> None:
        """A failed install leaves nothing that blocks the next attempt."""
        http = MockHttpClient()
        http.set_response(HUGO_URL, tar_gz({"other": b"x"}))
        cache = make_cache(tmp_path, http)

        failed = cache.get_or_install("hugo", "0.68.3")
        assert isinstance(failed, Err)
        assert isinstance(failed.error, BinaryNotFoundInArchive)

        http.set_response(HUGO_URL, tar_gz({"hugo": b"fixed"}))
        retried = cache.get_or_install("hugo", "0.68.3")

        assert isinstance(retried, Ok)
        assert retried.value.path is not None
        assert retried.value.path.read_bytes() == b"fixed"
        assert len(http.calls) == 2

    def test_timeout_while_reading_body(self, tmp_path: Path) -> None:
        data = tar_gz({HUGO_BIN: os.urandom(128 * 1024)})
        http = TimingOutHttpClient(data, len(data) // 2)

        result = make_cache(tmp_path, http).get_or_install("hugo", "0.68.3")

        assert isinstance(result, Err)
        assert isinstance(result.error, DownloadFailed)
        assert result.error.status == 0
        assert result.error.url == HUGO_URL
        assert result.error.project == "spf13/hugo"
        assert not (tmp_path / "binaries" / "spf13" / "hugo" / "v0.68.3" / "hugo").exists()
        assert leftover_staging(tmp_path) == []
