"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from binrc.cache.errors import (
    BinaryNotFoundInArchive,
    CacheError,
    CorruptArchive,
    DownloadFailed,
    InstallFailed,
    InvalidVersion,
    NoMatchingTemplate,
    UnknownProject,
    UnknownVersion,
)
from binrc.core.errors import ErrorCode
from binrc.output.console import Style

if TYPE_CHECKING:
    from binrc.core.config import ConfigError
    from binrc.output.console import ConsoleProtocol

__all__ = [
    "describe_cache_error",
    "cache_error_hint",
    "cache_error_exit_code",
    "print_cache_error",
    "print_config_error",
]


def describe_cache_error(error: CacheError) -> str:
    """One-line description with the project, version, URL or path involved."""
    match error:
        case UnknownProject(identifier=identifier):
            return f"invalid project name {identifier!r}: expected 'owner/name' or a known alias"
        case UnknownVersion(project=project):
            return f"unknown project version for {project}"
        case InvalidVersion(project=project, version=version, reason=reason):
            return f"invalid version {version} for {project}: {reason}"
        case NoMatchingTemplate(project=project, version=version):
            return f"no naming template for {project} matches {version}"
        case DownloadFailed(project=project, version=version, url=url, status=status, message=msg):
            if status:
                return (
                    f"error downloading {project} {version} from {url} - "
                    f"binary doesn't seem to exist: HTTP {status} {msg}"
                )
            return f"error downloading {project} {version} from {url}: {msg}"
        case CorruptArchive(destination=destination, reason=reason, project=project, url=url):
            return (
                f"error unpacking archive for {destination}{_origin(project, url)}: {reason}"
            )
        case BinaryNotFoundInArchive(
            destination=destination, expected=expected, fallback=fallback, project=project, url=url
        ):
            return (
                f"binary for {destination} not found in archive{_origin(project, url)} "
                f"(looked for {expected}, {fallback})"
            )
        case InstallFailed(path=path, reason=reason):
            return f"install failed at {path}: {reason}"


def _origin(project: str, url: str) -> str:
    parts = [p for p in (project, url) if p]
    return f", from {' '.join(parts)}" if parts else ""


def cache_error_hint(error: CacheError) -> str | None:
    match error:
        case UnknownProject(aliases=aliases) if aliases:
            return f"known aliases: {', '.join(aliases)}"
        case UnknownVersion(env_var=env_var):
            return f"pass a version or set {env_var}"
        case NoMatchingTemplate(ranges=ranges):
            return f"declared ranges: {'; '.join(ranges)}"
        case _:
            return None


def cache_error_exit_code(error: CacheError) -> int:
    """Get exit code for a cache error."""
    match error:
        case UnknownProject() | UnknownVersion() | InvalidVersion() | NoMatchingTemplate():
            return int(ErrorCode.USER_ERROR)
        case DownloadFailed():
            return int(ErrorCode.NETWORK_ERROR)
        case CorruptArchive() | BinaryNotFoundInArchive():
            return int(ErrorCode.ARCHIVE_ERROR)
        case InstallFailed():
            return int(ErrorCode.IO_ERROR)


def print_cache_error(error: CacheError, console: ConsoleProtocol) -> None:
    console.error(describe_cache_error(error))
    hint = cache_error_hint(error)
    if hint:
        console.print(f"hint: {hint}", Style.DIM)


def print_config_error(error: ConfigError, console: ConsoleProtocol) -> None:
    console.error(error.message)
