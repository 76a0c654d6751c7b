"""Project detection and project-local paths.

A project is any directory holding a ``frate.toml``. Its installed tools
live in a hidden state directory next to it:

    <root>/frate.toml
    <root>/frate.lock
    <root>/.frate/bin/<tool>/...     extracted archives
    <root>/.frate/shims/<tool>[.bat] forwarding entry points
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .errors import FilesystemError, ProjectNotFound
from .lockfile import LOCK_FILE
from .manifest import MANIFEST_FILE
from .result import Err, Ok, Result

__all__ = ["STATE_DIR", "Project", "find_project"]

STATE_DIR = ".frate"


@dataclass(frozen=True, slots=True)
class Project:
    root: Path

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_FILE

    @property
    def lock_path(self) -> Path:
        return self.root / LOCK_FILE

    @property
    def state_dir(self) -> Path:
        """Install root (``.frate/``)."""
        return self.root / STATE_DIR

    @property
    def bin_dir(self) -> Path:
        return self.state_dir / "bin"

    @property
    def shims_dir(self) -> Path:
        """Directory to put on PATH."""
        return self.state_dir / "shims"

    def ensure_dirs(self) -> Result[Path, FilesystemError]:
        """Create ``.frate/bin`` and ``.frate/shims``; returns the install root."""
        for directory in (self.bin_dir, self.shims_dir):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                return Err(FilesystemError(directory, f"Could not create directory ({e})"))
        return Ok(self.state_dir)


def find_project(start: Path | None = None) -> Result[Project, ProjectNotFound]:
    """Find the nearest directory at or above ``start`` holding frate.toml."""
    origin = (start or Path.cwd()).resolve()
    for candidate in (origin, *origin.parents):
        if (candidate / MANIFEST_FILE).is_file():
            return Ok(Project(candidate))
    return Err(ProjectNotFound(origin))
