"""Process exit codes for the binrc CLI."""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are part of the command-line contract and must stay stable:
    - 0: Success
    - 1: User error (unknown project, missing or invalid version)
    - 2: Config error (unreadable catalog or config file)
    - 3: Archive error (corrupt tarball, binary missing from it)
    - 4: Network error (release asset not downloadable)
    - 5: I/O error (cache directory or install move failed)
    """

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    ARCHIVE_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
