"""Global (per-user) directories.

frate keeps two kinds of state:
- project-local state under ``<project>/.frate/`` (see ``frate.core.project``)
- per-user state: configuration, the archive cache and data

The per-user roots are resolved here once per invocation and handed around
as a ``GlobalPaths`` value, so tests can point them at a temporary
directory instead of the real home.

Locations:
  Linux:   ~/.config/frate, ~/.cache/frate, ~/.local/share/frate (XDG vars honored)
  macOS:   ~/Library/{Application Support,Caches}/org.frate.frate
  Windows: %APPDATA%/frate/frate/{config,data}, %LOCALAPPDATA%/frate/frate/cache

``FRATE_CONFIG_DIR``, ``FRATE_CACHE_DIR`` and ``FRATE_DATA_DIR`` override each root.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from .detection import Platform, detect

__all__ = [
    "APP_NAME",
    "GlobalPaths",
    "home",
    "user_cache_dir",
    "user_config_dir",
    "user_data_dir",
    "clear_caches",
]

APP_NAME = "frate"
_MACOS_BUNDLE_ID = "org.frate.frate"


@dataclass(frozen=True, slots=True)
class GlobalPaths:
    """Per-user roots used by the config loader and the archive cache."""

    config: Path
    cache: Path
    data: Path

    @property
    def config_file(self) -> Path:
        return self.config / "config.toml"

    @classmethod
    def detect(cls) -> GlobalPaths:
        return cls(config=user_config_dir(), cache=user_cache_dir(), data=user_data_dir())

    @classmethod
    def under(cls, root: Path) -> GlobalPaths:
        """All three roots below a single directory (tests, portable installs)."""
        return cls(config=root / "config", cache=root / "cache", data=root / "data")


@lru_cache(maxsize=1)
def home() -> Path:
    """User home directory (USERPROFILE on Windows, HOME elsewhere)."""
    env = "USERPROFILE" if detect().platform == Platform.WINDOWS else "HOME"
    value = os.environ.get(env)
    if value:
        return Path(value)
    return Path.home()


def _windows_root(env: str, fallback: tuple[str, ...]) -> Path:
    value = os.environ.get(env)
    base = Path(value) if value else home().joinpath(*fallback)
    return base / APP_NAME / APP_NAME


def _xdg(env: str, fallback: tuple[str, ...]) -> Path:
    value = os.environ.get(env)
    base = Path(value) if value else home().joinpath(*fallback)
    return base / APP_NAME


@lru_cache(maxsize=1)
def user_config_dir() -> Path:
    override = os.environ.get("FRATE_CONFIG_DIR")
    if override:
        return Path(override)
    match detect().platform:
        case Platform.WINDOWS:
            return _windows_root("APPDATA", ("AppData", "Roaming")) / "config"
        case Platform.MACOS:
            return home() / "Library" / "Application Support" / _MACOS_BUNDLE_ID
        case _:
            return _xdg("XDG_CONFIG_HOME", (".config",))


@lru_cache(maxsize=1)
def user_cache_dir() -> Path:
    """Root of the archive cache."""
    override = os.environ.get("FRATE_CACHE_DIR")
    if override:
        return Path(override)
    match detect().platform:
        case Platform.WINDOWS:
            return _windows_root("LOCALAPPDATA", ("AppData", "Local")) / "cache"
        case Platform.MACOS:
            return home() / "Library" / "Caches" / _MACOS_BUNDLE_ID
        case _:
            return _xdg("XDG_CACHE_HOME", (".cache",))


@lru_cache(maxsize=1)
def user_data_dir() -> Path:
    override = os.environ.get("FRATE_DATA_DIR")
    if override:
        return Path(override)
    match detect().platform:
        case Platform.WINDOWS:
            return _windows_root("APPDATA", ("AppData", "Roaming")) / "data"
        case Platform.MACOS:
            return home() / "Library" / "Application Support" / _MACOS_BUNDLE_ID
        case _:
            return _xdg("XDG_DATA_HOME", (".local", "share"))


def clear_caches() -> None:
    """Forget resolved directories (tests that change the environment)."""
    home.cache_clear()
    user_config_dir.cache_clear()
    user_cache_dir.cache_clear()
    user_data_dir.cache_clear()
