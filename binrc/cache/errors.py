"""Failure kinds for resolving and installing cached binaries.

Each failure is a frozen dataclass carrying enough context (project,
version, URL or path) to diagnose without re-running. They travel inside
``Err`` values; ``binrc.output.errors`` renders them and picks exit codes.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "UnknownProject",
    "UnknownVersion",
    "InvalidVersion",
    "NoMatchingTemplate",
    "DownloadFailed",
    "CorruptArchive",
    "BinaryNotFoundInArchive",
    "InstallFailed",
    "ResolveError",
    "InstallError",
    "CacheError",
]


@dataclass(frozen=True, slots=True)
class UnknownProject:
    identifier: str
    aliases: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class UnknownVersion:
    project: str
    env_var: str


@dataclass(frozen=True, slots=True)
class InvalidVersion:
    project: str
    version: str
    reason: str


@dataclass(frozen=True, slots=True)
class NoMatchingTemplate:
    project: str
    version: str
    ranges: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class DownloadFailed:
    """The release asset could not be fetched.

    Attributes:
        status: HTTP status code, 0 for network-level failures
    """

    project: str
    version: str
    url: str
    status: int
    message: str


@dataclass(frozen=True, slots=True)
class CorruptArchive:
    """The downloaded data is not a readable gzip+tar archive.

    Attributes:
        project: ``owner/name``, empty when the installer is used on its own
        url: Where the archive came from, empty when unknown
    """

    destination: Path
    reason: str
    project: str = ""
    url: str = ""


@dataclass(frozen=True, slots=True)
class BinaryNotFoundInArchive:
    destination: Path
    expected: str
    fallback: str
    project: str = ""
    url: str = ""


@dataclass(frozen=True, slots=True)
class InstallFailed:
    path: Path
    reason: str


ResolveError = UnknownProject | UnknownVersion | InvalidVersion | NoMatchingTemplate

InstallError = DownloadFailed | CorruptArchive | BinaryNotFoundInArchive | InstallFailed

CacheError = ResolveError | InstallError
