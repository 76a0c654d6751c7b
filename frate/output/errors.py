"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from frate.core.errors import (
    BinaryNotFound,
    DownloadError,
    ErrorCode,
    FilesystemError,
    FrateError,
    IntegrityError,
    InvalidRequirement,
    InvalidVersion,
    ManifestError,
    NotFound,
    PackageNotLocked,
    ProjectNotFound,
    ShimCreationError,
    UnsupportedArchiveType,
    VersionNotFound,
)
from frate.output.console import Style

if TYPE_CHECKING:
    from frate.output.console import ConsoleProtocol

__all__ = ["print_error", "error_exit_code"]


def print_error(error: FrateError, console: ConsoleProtocol) -> None:
    """Print an error with its hint, if it has one."""
    console.error(error.message)
    match error:
        case PackageNotLocked(hint=hint) | ProjectNotFound(hint=hint):
            console.print(f"hint: {hint}", Style.DIM)
        case IntegrityError(location=location) if not location.startswith(("http://", "https://")):
            console.print(
                f"hint: the cached archive may be corrupt; run: frate cache evict {error.tool}",
                Style.DIM,
            )
        case VersionNotFound(tool=tool):
            console.print(f"hint: check the available releases of {tool} in the registry", Style.DIM)
        case _:
            pass


def error_exit_code(error: FrateError) -> int:
    """Exit code for an error."""
    match error:
        case InvalidRequirement() | InvalidVersion() | PackageNotLocked():
            return int(ErrorCode.USER_ERROR)
        case ProjectNotFound() | ManifestError() | VersionNotFound():
            return int(ErrorCode.ENV_ERROR)
        case IntegrityError():
            return int(ErrorCode.INTEGRITY_ERROR)
        case NotFound() | DownloadError():
            return int(ErrorCode.NETWORK_ERROR)
        case UnsupportedArchiveType() | BinaryNotFound() | FilesystemError() | ShimCreationError():
            return int(ErrorCode.IO_ERROR)
