"""Shims - stable, PATH-addressable entry points for installed tools.

A shim is named after the stem of the executable it forwards to and lives
in the project's ``.frate/shims`` directory. Its format is decided by the
platform adapter (symlink or ``.bat`` script).
"""

from __future__ import annotations

from pathlib import Path

from frate.core.errors import FilesystemError, ShimCreationError
from frate.core.result import Err, Ok, Result
from frate.platform.adapter import PlatformAdapter, select_adapter
from frate.platform.files import remove_path

__all__ = ["ShimManager", "create_shim"]


def create_shim(
    target: Path,
    shim_path: Path,
    adapter: PlatformAdapter | None = None,
) -> Result[Path, ShimCreationError]:
    """Create a shim at ``shim_path`` forwarding to ``target``."""
    adapter = adapter or select_adapter()
    return adapter.make_shim(target, shim_path)


class ShimManager:
    """Creates and removes shims in one shims directory."""

    def __init__(self, shims_dir: Path, adapter: PlatformAdapter) -> None:
        self._shims_dir = shims_dir
        self._adapter = adapter

    @property
    def shims_dir(self) -> Path:
        return self._shims_dir

    def path_for(self, name: str) -> Path:
        return self._adapter.shim_path(self._shims_dir, name)

    def exists(self, name: str) -> bool:
        path = self.path_for(name)
        return path.is_symlink() or path.exists()

    def create(self, target: Path) -> Result[Path, ShimCreationError]:
        """Shim for ``target``, named after its file stem."""
        shim = self._shims_dir / target.stem
        try:
            self._shims_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Err(ShimCreationError(shim, target, str(e)))
        return self._adapter.make_shim(target, shim)

    def remove(self, name: str) -> Result[bool, FilesystemError]:
        """Remove the shim for ``name``; Ok(False) if there was none."""
        path = self.path_for(name)
        try:
            return Ok(remove_path(path))
        except OSError as e:
            return Err(FilesystemError(path, f"Could not remove shim ({e})"))
