"""Tests for frate.platform.paths."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from frate.platform import paths
from frate.platform.detection import HostInfo
from frate.platform.paths import GlobalPaths


@pytest.fixture(autouse=True)
def _fresh_paths() -> Iterator[None]:
    paths.clear_caches()
    yield
    paths.clear_caches()


class TestGlobalPaths:
    def test_under(self, tmp_path: Path) -> None:
        gp = GlobalPaths.under(tmp_path)
        assert gp.cache == tmp_path / "cache"
        assert gp.config_file == tmp_path / "config" / "config.toml"

    def test_env_overrides(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FRATE_CONFIG_DIR", str(tmp_path / "cfg"))
        monkeypatch.setenv("FRATE_CACHE_DIR", str(tmp_path / "cache"))
        monkeypatch.setenv("FRATE_DATA_DIR", str(tmp_path / "data"))
        assert GlobalPaths.detect() == GlobalPaths(
            config=tmp_path / "cfg", cache=tmp_path / "cache", data=tmp_path / "data"
        )

    def test_xdg_on_linux(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("FRATE_CACHE_DIR", raising=False)
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg"))
        monkeypatch.setattr(paths, "detect", lambda: _host("linux"))
        assert paths.user_cache_dir() == tmp_path / "xdg" / "frate"

    def test_windows_cache(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("FRATE_CACHE_DIR", raising=False)
        monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "local"))
        monkeypatch.setattr(paths, "detect", lambda: _host("windows"))
        assert paths.user_cache_dir() == tmp_path / "local" / "frate" / "frate" / "cache"

    def test_macos_cache(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("FRATE_CACHE_DIR", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setattr(paths, "detect", lambda: _host("macos"))
        assert paths.user_cache_dir() == tmp_path / "Library" / "Caches" / "org.frate.frate"


def _host(os_name: str) -> HostInfo:
    return HostInfo(os=os_name, arch="x86_64")
