"""Platform adapter: everything that differs between POSIX and Windows.

One adapter is selected at startup and passed to the installer, the shim
layer and the executable locator:

- shims: symlink on POSIX, ``.bat`` forwarding script on Windows
- executables: any execute bit on POSIX, ``.exe``/``.bat``/``.cmd`` on Windows
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol, runtime_checkable

from frate.core.errors import ShimCreationError
from frate.core.result import Err, Ok, Result

from .detection import Platform, detect

__all__ = ["PlatformAdapter", "PosixAdapter", "WindowsAdapter", "select_adapter"]


@runtime_checkable
class PlatformAdapter(Protocol):
    """Platform-specific filesystem behavior."""

    @property
    def binary_extension(self) -> str:
        """Suffix of native executables ("" or ".exe")."""
        ...

    def is_executable(self, path: Path) -> bool:
        """Whether a regular file counts as an executable candidate."""
        ...

    def shim_path(self, shims_dir: Path, name: str) -> Path:
        """Where the shim for ``name`` lives."""
        ...

    def make_shim(self, target: Path, shim: Path) -> Result[Path, ShimCreationError]:
        """Create a shim at ``shim`` forwarding to ``target``.

        Returns:
            Ok with the path actually written, or Err
        """
        ...


class PosixAdapter:
    """Linux/macOS: shims are symbolic links."""

    @property
    def binary_extension(self) -> str:
        return ""

    def is_executable(self, path: Path) -> bool:
        try:
            return path.stat().st_mode & 0o111 != 0
        except OSError:
            return False

    def shim_path(self, shims_dir: Path, name: str) -> Path:
        return shims_dir / name

    def make_shim(self, target: Path, shim: Path) -> Result[Path, ShimCreationError]:
        try:
            if shim.is_symlink() or shim.is_file():
                shim.unlink()
            elif shim.exists():
                return Err(ShimCreationError(shim, target, "path exists and is not a file"))
            os.symlink(target, shim)
        except OSError as e:
            return Err(ShimCreationError(shim, target, str(e)))
        return Ok(shim)


class WindowsAdapter:
    """Windows: shims are batch scripts calling the real executable."""

    _EXECUTABLE_SUFFIXES = frozenset({".exe", ".bat", ".cmd"})

    @property
    def binary_extension(self) -> str:
        return ".exe"

    def is_executable(self, path: Path) -> bool:
        return path.suffix.lower() in self._EXECUTABLE_SUFFIXES

    def shim_path(self, shims_dir: Path, name: str) -> Path:
        return shims_dir / f"{name}.bat"

    def make_shim(self, target: Path, shim: Path) -> Result[Path, ShimCreationError]:
        if shim.suffix.lower() != ".bat":
            shim = shim.with_name(f"{shim.name}.bat")
        if shim.is_dir():
            return Err(ShimCreationError(shim, target, "path exists and is not a file"))

        # CRLF line endings
        script = f'@echo off\r\ncall "{target}" %*\r\n'
        try:
            shim.write_bytes(script.encode("utf-8"))
        except OSError as e:
            return Err(ShimCreationError(shim, target, str(e)))
        return Ok(shim)


def select_adapter(platform: Platform | None = None) -> PlatformAdapter:
    """Adapter for ``platform`` (default: the current host)."""
    platform = platform or detect().platform
    if platform == Platform.WINDOWS:
        return WindowsAdapter()
    return PosixAdapter()
