"""Staged extraction and atomic installation of release binaries.

The installer:
- Extracts a gzip+tar stream into a private staging directory
- Finds the binary at its templated path, or at the archive top level
- Renames it onto the destination, so readers never see a partial file
- Removes the staging directory on every path out
"""

from __future__ import annotations

import http.client
import os
import shutil
import stat
import tarfile
import tempfile
import zlib
from pathlib import Path, PurePosixPath
from typing import IO, cast

from binrc.core.result import Err, Ok, Result

from .errors import (
    BinaryNotFoundInArchive,
    CorruptArchive,
    DownloadFailed,
    InstallError,
    InstallFailed,
)

__all__ = ["Installer", "STAGING_PREFIX"]

STAGING_PREFIX = ".binrc-staging-"


class _SourceReadError(Exception):
    """Reading the download stream failed (timeout, reset, short body)."""


class _SourceReader:
    """Read-only view of the download stream.

    Network errors raised by ``read`` are re-raised as ``_SourceReadError``,
    which is not an ``OSError``, so they are never mistaken for a failed
    write into the staging directory.
    """

    def __init__(self, stream: IO[bytes]) -> None:
        self._stream = stream

    def read(self, size: int = -1) -> bytes:
        try:
            return self._stream.read(size)
        except (OSError, http.client.HTTPException) as e:
            raise _SourceReadError(str(e) or type(e).__name__) from e


class Installer:
    """Installs one binary out of a tar.gz stream.

    Usage:
        installer = Installer()
        result = installer.install(stream, "hugo_0.15_linux_amd64/hugo", "hugo", dest)
        if is_ok(result):
            print(f"Installed {result.value}")
    """

    def install(
        self,
        stream: IO[bytes],
        binary_path: str,
        fallback_name: str,
        destination: Path,
        *,
        project: str = "",
        version: str = "",
        url: str = "",
    ) -> Result[Path, InstallError]:
        """Extract ``stream`` and install its binary at ``destination``.

        Args:
            stream: gzip-compressed tar data, read to the end
            binary_path: Expected binary location inside the archive
            fallback_name: Top-level name tried when ``binary_path`` is absent
            destination: Final binary path
            project: ``owner/name`` reported in errors
            version: Release version reported in errors
            url: Origin of ``stream`` reported in errors

        Returns:
            Ok with destination, or Err with DownloadFailed (the stream broke
            while reading), CorruptArchive, BinaryNotFoundInArchive or
            InstallFailed
        """
        parent = destination.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
            # Sibling of the version directory: same filesystem, so the final
            # rename is atomic.
            staging = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=parent.parent))
        except OSError as e:
            return Err(InstallFailed(path=parent, reason=f"cannot prepare cache directory: {e}"))

        try:
            try:
                extracted = self._extract(
                    _SourceReader(stream), staging, destination, project=project, url=url
                )
            except _SourceReadError as e:
                return Err(
                    DownloadFailed(
                        project=project,
                        version=version,
                        url=url,
                        status=0,
                        message=f"download interrupted: {e}",
                    )
                )
            if isinstance(extracted, Err):
                return extracted

            found = self._locate(staging, binary_path, fallback_name)
            if found is None:
                return Err(
                    BinaryNotFoundInArchive(
                        destination=destination,
                        expected=binary_path,
                        fallback=fallback_name,
                        project=project,
                        url=url,
                    )
                )

            try:
                os.replace(found, destination)
            except OSError as e:
                return Err(InstallFailed(path=destination, reason=f"cannot move binary: {e}"))

            return Ok(destination)
        finally:
            shutil.rmtree(staging, ignore_errors=True)

    def _extract(
        self,
        source: _SourceReader,
        staging: Path,
        destination: Path,
        *,
        project: str,
        url: str,
    ) -> Result[int, InstallError]:
        """Stream-extract directories and regular files into ``staging``.

        Returns:
            Ok with the number of files written, or Err

        Raises:
            _SourceReadError: If reading ``source`` fails
        """
        root = staging.resolve()
        files_count = 0
        try:
            with tarfile.open(fileobj=cast(IO[bytes], source), mode="r|gz") as tar:
                for member in tar:
                    rel_path = self._safe_relative_path(member.name)
                    if rel_path is None:
                        continue

                    target = staging / rel_path
                    if not self._is_within_root(root, target):
                        continue

                    if member.isdir():
                        written = self._make_dir(target, member.mode)
                    elif member.isreg():
                        src = tar.extractfile(member)
                        if src is None:
                            continue
                        with src:
                            written = self._write_file(src, target, member.mode)
                        files_count += 1
                    else:
                        # Links, devices and fifos are never the binary.
                        continue

                    if isinstance(written, Err):
                        return written
        except (tarfile.TarError, EOFError, zlib.error) as e:
            reason = str(e) or type(e).__name__
            return Err(
                CorruptArchive(destination=destination, reason=reason, project=project, url=url)
            )

        return Ok(files_count)

    def _make_dir(self, path: Path, mode: int) -> Result[None, InstallError]:
        # Owner rwx is kept so later entries can be written and the staging
        # tree can be removed.
        dir_mode = (mode & 0o777) | stat.S_IRWXU
        try:
            path.mkdir(parents=True, exist_ok=True)
            os.chmod(path, dir_mode)
        except OSError as e:
            return Err(InstallFailed(path=path, reason=f"cannot create directory: {e}"))
        return Ok(None)

    def _write_file(self, src: IO[bytes], path: Path, mode: int) -> Result[None, InstallError]:
        file_mode = mode & 0o777
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(path, os.O_CREAT | os.O_TRUNC | os.O_WRONLY, file_mode or 0o644)
            with os.fdopen(fd, "wb") as dst:
                shutil.copyfileobj(src, dst)
            # os.open is subject to the umask; apply the recorded mode exactly.
            if file_mode:
                os.chmod(path, file_mode)
        except OSError as e:
            return Err(InstallFailed(path=path, reason=f"cannot write file: {e}"))
        return Ok(None)

    def _locate(self, staging: Path, binary_path: str, fallback_name: str) -> Path | None:
        """Find the binary: templated path first, then the bare name."""
        root = staging.resolve()
        for candidate in (binary_path, fallback_name):
            rel_path = self._safe_relative_path(candidate)
            if rel_path is None:
                continue
            path = staging / rel_path
            if self._is_within_root(root, path) and path.is_file():
                return path
        return None

    def _safe_relative_path(self, member_name: str) -> Path | None:
        """Return a sanitized relative path, or None if unsafe."""
        normalized = member_name.replace("\\", "/")
        if normalized.startswith("/"):
            return None

        parts = [part for part in PurePosixPath(normalized).parts if part != "."]
        if not parts:
            return None
        if any(part in {"", ".."} for part in parts):
            return None
        if parts[0].endswith(":"):
            return None

        return Path(*parts)

    def _is_within_root(self, root: Path, target: Path) -> bool:
        try:
            return target.resolve().is_relative_to(root)
        except OSError:
            return False
