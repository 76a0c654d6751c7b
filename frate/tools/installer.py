"""Installing locked packages into a project.

For each locked package:

1. decide the archive kind from the source URL (unsupported -> error, nothing touched)
2. cached archive? hash it; otherwise download and hash the response body
3. on a hash match, cache fresh downloads and extract into ``bin/<name>``
4. locate the primary executable and point a shim at it

Packages are installed one after another. ``install_all`` stops at the
first failing package and returns its error; packages installed before it
stay installed.

Install root layout (``<project>/.frate``):

    bin/<name>/...       extracted archive, replaced on reinstall
    shims/<stem>[.bat]   entry point for the located executable
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from frate.core.digest import sha256_hex
from frate.core.errors import (
    DownloadError,
    FilesystemError,
    InstallError,
    IntegrityError,
)
from frate.core.lockfile import LockedPackage, Lockfile
from frate.core.project import Project
from frate.core.result import Err, Ok, Result
from frate.output.console import ConsoleProtocol
from frate.platform.adapter import PlatformAdapter

from .cache import ArchiveCache
from .extract import archive_kind, extract_archive
from .http import HttpClient
from .locate import find_primary_executable
from .shims import ShimManager

__all__ = ["InstalledPaths", "InstallResult", "Installer"]


@dataclass(frozen=True, slots=True)
class InstallResult:
    """Outcome of one package installation.

    Attributes:
        name: Package name
        install_dir: ``bin/<name>`` directory holding the extracted files
        executable: Located primary executable
        shim: Shim path that was written
        from_cache: True if the archive came from the cache
    """

    name: str
    install_dir: Path
    executable: Path
    shim: Path
    from_cache: bool


@dataclass(frozen=True, slots=True)
class InstalledPaths:
    """What is on disk for a tool (either part may be missing)."""

    executable: Path | None
    shim: Path | None

    @property
    def installed(self) -> bool:
        return self.executable is not None


class Installer:
    """Materializes lockfile entries on disk.

    Usage:
        installer = Installer(http, ArchiveCache(paths.cache), select_adapter(), console)
        result = installer.install_all(lockfile, project.root)
    """

    def __init__(
        self,
        http: HttpClient,
        cache: ArchiveCache,
        adapter: PlatformAdapter,
        console: ConsoleProtocol,
    ) -> None:
        self._http = http
        self._cache = cache
        self._adapter = adapter
        self._console = console

    def _shims(self, install_root: Path) -> ShimManager:
        return ShimManager(install_root / "shims", self._adapter)

    def _verify(self, package: LockedPackage, data: bytes, location: str) -> IntegrityError | None:
        actual = sha256_hex(data)
        if actual != package.digest:
            return IntegrityError(
                tool=package.name,
                expected=package.digest,
                actual=actual,
                location=location,
            )
        return None

    def _fetch(self, package: LockedPackage) -> Result[tuple[bytes, bool], InstallError]:
        """Verified archive bytes, and whether they came from the cache."""
        cached = self._cache.lookup(package.source)
        if cached is not None:
            try:
                data = cached.read_bytes()
            except OSError as e:
                return Err(FilesystemError(cached, f"Could not read cached archive ({e})"))
            mismatch = self._verify(package, data, str(cached))
            if mismatch is not None:
                return Err(mismatch)
            self._console.debug(f"Using cached archive {cached}")
            return Ok((data, True))

        self._console.print(f"{'Downloading':>12} {package.source}")
        response = self._http.get_bytes(package.source)
        if isinstance(response, Err):
            error = response.error
            return Err(DownloadError(url=package.source, status=error.status, reason=error.message))
        data = response.value

        mismatch = self._verify(package, data, package.source)
        if mismatch is not None:
            return Err(mismatch)

        if self._cache.lookup(package.source) is None:
            stored = self._cache.store(package.source, data)
            if isinstance(stored, Err):
                # Cache is an optimization; the verified bytes are still usable.
                self._console.warning(stored.error.message)
            else:
                self._console.debug(f"Cached {stored.value}")
        return Ok((data, False))

    def install(
        self, package: LockedPackage, install_root: Path
    ) -> Result[InstallResult, InstallError]:
        """Install one package under ``install_root`` (the project's ``.frate``)."""
        install_root = install_root.resolve()
        kind = archive_kind(package.source)
        if isinstance(kind, Err):
            return kind

        fetched = self._fetch(package)
        if isinstance(fetched, Err):
            return fetched
        data, from_cache = fetched.value

        dest = install_root / "bin" / package.name
        self._console.debug(f"Extracting {kind.value} archive to {dest}")
        extracted = extract_archive(data, kind.value, dest)
        if isinstance(extracted, Err):
            return extracted

        located = find_primary_executable(dest, package.name, self._adapter)
        if isinstance(located, Err):
            return located
        executable = located.value

        shim = self._shims(install_root).create(executable)
        if isinstance(shim, Err):
            return shim

        self._console.success(f"Installed {package.name} {package.version}")
        return Ok(
            InstallResult(
                name=package.name,
                install_dir=dest,
                executable=executable,
                shim=shim.value,
                from_cache=from_cache,
            )
        )

    def install_all(
        self, lockfile: Lockfile, project_root: Path
    ) -> Result[list[InstallResult], InstallError]:
        """Install every locked package, in lockfile order, stopping at the first failure."""
        ensured = Project(project_root.resolve()).ensure_dirs()
        if isinstance(ensured, Err):
            return ensured
        install_root = ensured.value

        results: list[InstallResult] = []
        for package in lockfile.packages:
            result = self.install(package, install_root)
            if isinstance(result, Err):
                return result
            results.append(result.value)
        return Ok(results)

    def _shim_name(self, name: str, install_root: Path) -> str:
        """Shims are named after the installed executable; fall back to the tool name."""
        located = find_primary_executable(install_root / "bin" / name, name, self._adapter)
        return located.value.stem if isinstance(located, Ok) else name

    def uninstall(self, name: str, install_root: Path) -> Result[bool, FilesystemError]:
        """Remove ``bin/<name>`` and the shim pointing into it.

        Returns:
            Ok(True) if anything was removed, Ok(False) if nothing was installed
        """
        shim_name = self._shim_name(name, install_root)
        bin_path = install_root / "bin" / name
        removed_dir = False
        if bin_path.exists():
            try:
                shutil.rmtree(bin_path)
            except OSError as e:
                return Err(FilesystemError(bin_path, f"Could not remove directory ({e})"))
            removed_dir = True

        removed_shim = self._shims(install_root).remove(shim_name)
        if isinstance(removed_shim, Err):
            return removed_shim
        return Ok(removed_dir or removed_shim.value)

    def uninstall_all(self, install_root: Path) -> Result[None, FilesystemError]:
        """Empty ``bin/`` and ``shims/`` (both are recreated)."""
        for directory in (install_root / "bin", install_root / "shims"):
            try:
                if directory.exists():
                    shutil.rmtree(directory)
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                return Err(FilesystemError(directory, f"Could not reset directory ({e})"))
        return Ok(None)

    def find_installed(self, name: str, install_root: Path) -> InstalledPaths:
        located = find_primary_executable(install_root / "bin" / name, name, self._adapter)
        shim_name = located.value.stem if isinstance(located, Ok) else name
        shims = self._shims(install_root)
        return InstalledPaths(
            executable=located.value if isinstance(located, Ok) else None,
            shim=shims.path_for(shim_name) if shims.exists(shim_name) else None,
        )
