"""Resolve, check the store, and download on a miss.

``Cache.get_or_install`` is the one operation the CLI needs: it returns a
Project whose ``path`` points at an existing binary, or the first error met
along the way.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from binrc.core.config import DEFAULT_RELEASE_HOST
from binrc.core.result import Err, Ok, Result
from binrc.output.console import Style

from .errors import CacheError, DownloadFailed
from .installer import Installer

if TYPE_CHECKING:
    from binrc.output.console import ConsoleProtocol

    from .http import HttpClient, HttpError
    from .project import Project, ProjectResolver
    from .store import CacheStore

__all__ = ["Cache", "release_url"]


def release_url(project: Project, host: str = DEFAULT_RELEASE_HOST) -> str:
    """Download URL of the project's release tarball."""
    return (
        f"https://{host}/{project.owner}/{project.name}"
        f"/releases/download/{project.version}/{project.tarball_name}"
    )


class Cache:
    """Cached binaries backed by release downloads.

    Usage:
        cache = Cache(CacheStore(root), ProjectResolver(templates, aliases), RealHttpClient())
        result = cache.get_or_install("hugo", "0.68.3")
        if is_ok(result):
            print(result.value.path)
    """

    def __init__(
        self,
        store: CacheStore,
        resolver: ProjectResolver,
        http: HttpClient,
        installer: Installer | None = None,
        *,
        release_host: str = DEFAULT_RELEASE_HOST,
        console: ConsoleProtocol | None = None,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._http = http
        self._installer = installer or Installer()
        self._release_host = release_host
        self._console = console

    @property
    def store(self) -> CacheStore:
        return self._store

    def download_url(self, project: Project) -> str:
        return release_url(project, self._release_host)

    def get_or_install(self, identifier: str, version: str = "") -> Result[Project, CacheError]:
        """Return the project with the path of its cached binary.

        Args:
            identifier: ``owner/name`` or alias
            version: Release version; empty to use ``{NAME}_VERSION``

        Returns:
            Ok with Project (``path`` set), or Err with the failure
        """
        resolved = self._resolver.resolve(identifier, version)
        if isinstance(resolved, Err):
            return resolved
        project = resolved.value

        path = self._store.binary_path(project)
        if self._store.exists(path):
            if not self._store.is_executable(path):
                self._warn(f"{project}: cached binary is not executable: {path}")
            return Ok(project.with_path(path))

        url = self.download_url(project)
        self._status(f"download {project} from {url}")

        opened = self._http.open(url)
        if isinstance(opened, Err):
            return Err(self._download_failed(project, opened.error))

        with opened.value as stream:
            installed = self._installer.install(
                stream,
                project.binary_name,
                project.name,
                path,
                project=project.full_name,
                version=project.version,
                url=url,
            )
        if isinstance(installed, Err):
            return installed

        self._status(f"installed {project} at {installed.value}")
        return Ok(project.with_path(installed.value))

    def _download_failed(self, project: Project, error: HttpError) -> DownloadFailed:
        return DownloadFailed(
            project=project.full_name,
            version=project.version,
            url=error.url,
            status=error.status,
            message=error.message,
        )

    def _status(self, message: str) -> None:
        if self._console is not None:
            self._console.print(message, Style.DIM)

    def _warn(self, message: str) -> None:
        if self._console is not None:
            self._console.warning(message)
