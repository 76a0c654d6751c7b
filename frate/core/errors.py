"""Typed failures and exit codes.

Every expected failure of the resolve -> lock -> install pipeline is a small
frozen dataclass carrying enough context (tool name, URL, path, hashes) to be
diagnosed from its ``message`` alone. The ``FrateError`` union is what
``frate.output.errors`` renders and maps to an exit status.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

__all__ = [
    "ErrorCode",
    "NotFound",
    "VersionNotFound",
    "DownloadError",
    "IntegrityError",
    "UnsupportedArchiveType",
    "BinaryNotFound",
    "FilesystemError",
    "ShimCreationError",
    "ManifestError",
    "InvalidVersion",
    "PackageNotLocked",
    "InvalidRequirement",
    "ProjectNotFound",
    "ResolveError",
    "InstallError",
    "FrateError",
]


class ErrorCode(IntEnum):
    """Process exit codes.

    - 0: Success
    - 1: User error (bad input, unknown package)
    - 2: Environment error (missing frate.toml, no matching release)
    - 3: Integrity error (hash mismatch)
    - 4: Network error (registry or download unreachable)
    - 5: I/O error (filesystem, extraction, shim)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    INTEGRITY_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")


@dataclass(frozen=True, slots=True)
class NotFound:
    """Registry document missing, unreachable or unparsable."""

    tool: str
    url: str
    reason: str

    @property
    def message(self) -> str:
        return f"{self.tool}: registry entry not available ({self.reason}) [{self.url}]"


@dataclass(frozen=True, slots=True)
class VersionNotFound:
    """No release key matched, including after the libc fallback."""

    tool: str
    tried: tuple[str, ...]

    @property
    def message(self) -> str:
        return f"No release found for {self.tool} (tried: {', '.join(self.tried)})"


@dataclass(frozen=True, slots=True)
class DownloadError:
    url: str
    status: int
    reason: str

    @property
    def message(self) -> str:
        if self.status:
            return f"Failed to download {self.url}: HTTP {self.status} {self.reason}"
        return f"Failed to download {self.url}: {self.reason}"


@dataclass(frozen=True, slots=True)
class IntegrityError:
    """SHA-256 of the archive bytes does not match the locked hash.

    Attributes:
        tool: Package name
        expected: Hash from the lockfile (prefix stripped)
        actual: Hash computed over the bytes
        location: Cache path or source URL the bytes came from
    """

    tool: str
    expected: str
    actual: str
    location: str

    @property
    def message(self) -> str:
        return (
            f"Hash mismatch for {self.tool}\n"
            f"  expected: {self.expected}\n"
            f"  got: {self.actual}\n"
            f"  for: {self.location}"
        )


@dataclass(frozen=True, slots=True)
class UnsupportedArchiveType:
    source: str

    @property
    def message(self) -> str:
        return f"Unsupported archive type: {self.source.rsplit('/', 1)[-1]}"


@dataclass(frozen=True, slots=True)
class BinaryNotFound:
    tool: str
    searched: Path

    @property
    def message(self) -> str:
        return f"No executable found for {self.tool} in '{self.searched}'"


@dataclass(frozen=True, slots=True)
class FilesystemError:
    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"{self.reason}: {self.path}"


@dataclass(frozen=True, slots=True)
class ShimCreationError:
    shim: Path
    target: Path
    reason: str

    @property
    def message(self) -> str:
        return f"Could not create shim {self.shim} -> {self.target}: {self.reason}"


@dataclass(frozen=True, slots=True)
class ManifestError:
    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"Invalid manifest {self.path}: {self.reason}"


@dataclass(frozen=True, slots=True)
class InvalidVersion:
    version: str

    @property
    def message(self) -> str:
        return f"Invalid version {self.version!r} (expected major.minor.patch, no leading 'v')"


@dataclass(frozen=True, slots=True)
class PackageNotLocked:
    name: str
    hint: str = "Run: frate sync"

    @property
    def message(self) -> str:
        return f"Package not found in frate.lock: {self.name}"


@dataclass(frozen=True, slots=True)
class InvalidRequirement:
    """Malformed `<name>@<version>` argument or tool name."""

    text: str
    reason: str

    @property
    def message(self) -> str:
        return f"Invalid requirement {self.text!r}: {self.reason}"


@dataclass(frozen=True, slots=True)
class ProjectNotFound:
    searched_from: Path
    hint: str = "Run: frate init"

    @property
    def message(self) -> str:
        return f"frate.toml not found in {self.searched_from} or any parent directory"


ResolveError = NotFound | VersionNotFound

InstallError = (
    DownloadError
    | IntegrityError
    | UnsupportedArchiveType
    | BinaryNotFound
    | FilesystemError
    | ShimCreationError
)

FrateError = (
    ResolveError
    | InstallError
    | ManifestError
    | InvalidVersion
    | InvalidRequirement
    | PackageNotLocked
    | ProjectNotFound
)
