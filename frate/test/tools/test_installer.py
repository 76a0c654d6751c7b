"""Tests for frate.tools.installer - download, verify, cache, extract, shim."""

import hashlib
import io
import os
import tarfile
import zipfile
from pathlib import Path

import pytest

from frate.core.errors import (
    BinaryNotFound,
    DownloadError,
    IntegrityError,
    UnsupportedArchiveType,
)
from frate.core.lockfile import LockedPackage, Lockfile
from frate.core.result import Err, Ok
from frate.output.console import MockConsole
from frate.platform.adapter import PlatformAdapter, PosixAdapter, WindowsAdapter
from frate.tools.cache import ArchiveCache
from frate.tools.http import HttpError, MockHttpClient
from frate.tools.installer import Installer

JUST_URL = "https://github.com/casey/just/releases/download/1.42.1/just-1.42.1-x86_64-unknown-linux-musl.tar.gz"
RG_URL = "https://github.com/BurntSushi/ripgrep/releases/download/14.1.0/ripgrep-14.1.0-x86_64-pc-windows-msvc.zip"


def make_tar_gz(files: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(content)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(content))
    return buf.getvalue()


def make_zip(files: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, content in files.items():
            info = zipfile.ZipInfo(name)
            info.external_attr = 0o100755 << 16
            zf.writestr(info, content)
    return buf.getvalue()


def locked(name: str, url: str, data: bytes, *, prefix: str = "sha256:") -> LockedPackage:
    return LockedPackage(
        name=name, version="1.0.0", source=url, hash=prefix + hashlib.sha256(data).hexdigest()
    )


class Harness:
    """Installer wired to a mock network and a temporary cache."""

    def __init__(self, tmp_path: Path, adapter: PlatformAdapter) -> None:
        self.http = MockHttpClient()
        self.cache = ArchiveCache(tmp_path / "cache")
        self.console = MockConsole()
        self.root = tmp_path / "project" / ".frate"
        self.installer = Installer(self.http, self.cache, adapter, self.console)


posix_only = pytest.mark.skipif(os.name == "nt", reason="POSIX symlink shims")


@posix_only
class TestInstallPosix:
    def test_fresh_install(self, tmp_path: Path) -> None:
        data = make_tar_gz({"just-1.42.1/just": b"#!/bin/sh\n", "just-1.42.1/README.md": b""})
        h = Harness(tmp_path, PosixAdapter())
        h.http.set_bytes(JUST_URL, data)

        result = h.installer.install(locked("just", JUST_URL, data), h.root)

        assert isinstance(result, Ok)
        assert result.value.from_cache is False
        assert result.value.executable == h.root / "bin" / "just" / "just-1.42.1" / "just"
        assert result.value.shim == h.root / "shims" / "just"
        assert (h.root / "shims" / "just").resolve() == result.value.executable.resolve()
        assert h.cache.lookup(JUST_URL) is not None
        assert h.console.find("Installed just 1.0.0")

    def test_second_install_uses_cache(self, tmp_path: Path) -> None:
        data = make_tar_gz({"just": b"bin"})
        h = Harness(tmp_path, PosixAdapter())
        h.http.set_bytes(JUST_URL, data)
        package = locked("just", JUST_URL, data)

        h.installer.install(package, h.root)
        again = h.installer.install(package, h.root)

        assert isinstance(again, Ok)
        assert again.value.from_cache is True
        assert h.http.urls("get_bytes") == [JUST_URL]

    def test_reinstall_is_idempotent(self, tmp_path: Path) -> None:
        data = make_tar_gz({"just": b"bin"})
        h = Harness(tmp_path, PosixAdapter())
        h.http.set_bytes(JUST_URL, data)
        package = locked("just", JUST_URL, data)

        first = h.installer.install(package, h.root).unwrap()
        (first.install_dir / "leftover").write_text("", encoding="utf-8")
        second = h.installer.install(package, h.root).unwrap()

        assert second.executable == first.executable
        assert not (second.install_dir / "leftover").exists()
        assert sorted(p.name for p in (h.root / "shims").iterdir()) == ["just"]

    def test_plain_hex_hash(self, tmp_path: Path) -> None:
        data = make_tar_gz({"just": b"bin"})
        h = Harness(tmp_path, PosixAdapter())
        h.http.set_bytes(JUST_URL, data)
        assert isinstance(h.installer.install(locked("just", JUST_URL, data, prefix=""), h.root), Ok)

    def test_no_executable(self, tmp_path: Path) -> None:
        buf = io.BytesIO()
        with tarfile.open(fileobj=buf, mode="w:gz") as tar:
            info = tarfile.TarInfo("README.md")
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(b""))
        data = buf.getvalue()
        h = Harness(tmp_path, PosixAdapter())
        h.http.set_bytes(JUST_URL, data)

        result = h.installer.install(locked("just", JUST_URL, data), h.root)

        assert isinstance(result, Err)
        assert isinstance(result.error, BinaryNotFound)


class TestIntegrity:
    def test_corrupted_download(self, tmp_path: Path) -> None:
        data = make_tar_gz({"just": b"bin"})
        h = Harness(tmp_path, PosixAdapter())
        package = locked("just", JUST_URL, data)
        corrupted = bytes([data[0] ^ 0xFF]) + data[1:]
        h.http.set_bytes(JUST_URL, corrupted)

        result = h.installer.install(package, h.root)

        assert isinstance(result, Err)
        assert result.error == IntegrityError(
            tool="just",
            expected=package.digest,
            actual=hashlib.sha256(corrupted).hexdigest(),
            location=JUST_URL,
        )
        assert not (h.root / "bin" / "just").exists()
        assert h.cache.lookup(JUST_URL) is None

    def test_corrupt_cache_entry_is_reported_and_kept(self, tmp_path: Path) -> None:
        data = make_tar_gz({"just": b"bin"})
        h = Harness(tmp_path, PosixAdapter())
        h.http.set_bytes(JUST_URL, data)
        h.cache.store(JUST_URL, b"truncated")

        result = h.installer.install(locked("just", JUST_URL, data), h.root)

        assert isinstance(result, Err)
        assert isinstance(result.error, IntegrityError)
        assert result.error.location == str(h.cache.lookup(JUST_URL))
        assert h.http.calls == []
        assert h.cache.lookup(JUST_URL) is not None


class TestInstallFailures:
    def test_unsupported_archive_before_network(self, tmp_path: Path) -> None:
        h = Harness(tmp_path, PosixAdapter())
        url = "https://x/tool-1.0.0.tar.xz"

        result = h.installer.install(locked("tool", url, b""), h.root)

        assert result == Err(UnsupportedArchiveType(url))
        assert h.http.calls == []
        assert not (h.root / "bin").exists()

    def test_download_error(self, tmp_path: Path) -> None:
        h = Harness(tmp_path, PosixAdapter())
        h.http.set_bytes(JUST_URL, HttpError(JUST_URL, 503, "Service Unavailable"))

        result = h.installer.install(locked("just", JUST_URL, b""), h.root)

        assert result == Err(DownloadError(url=JUST_URL, status=503, reason="Service Unavailable"))


class TestInstallWindows:
    def test_zip_with_bat_shim(self, tmp_path: Path) -> None:
        data = make_zip({"ripgrep-14.1.0/rg.exe": b"MZ", "ripgrep-14.1.0/doc/rg.1": b""})
        h = Harness(tmp_path, WindowsAdapter())
        h.http.set_bytes(RG_URL, data)

        result = h.installer.install(locked("rg", RG_URL, data), h.root)

        assert isinstance(result, Ok)
        shim = h.root / "shims" / "rg.bat"
        assert result.value.shim == shim
        assert shim.read_bytes() == (
            f'@echo off\r\ncall "{result.value.executable}" %*\r\n'.encode()
        )


class TestInstallAll:
    def test_in_order_and_fail_fast(self, tmp_path: Path) -> None:
        good = make_zip({"a.exe": b"MZ"})
        h = Harness(tmp_path, WindowsAdapter())
        h.http.set_bytes("https://x/a.zip", good)
        lock = Lockfile(
            [
                locked("a", "https://x/a.zip", good),
                locked("b", "https://x/b.zip", b"missing"),
                locked("c", "https://x/c.zip", b"never"),
            ]
        )

        result = h.installer.install_all(lock, tmp_path / "project")

        assert isinstance(result, Err)
        assert isinstance(result.error, DownloadError)
        assert h.http.urls("get_bytes") == ["https://x/a.zip", "https://x/b.zip"]
        assert (h.root / "shims" / "a.bat").exists()

    def test_empty_lockfile_creates_dirs(self, tmp_path: Path) -> None:
        h = Harness(tmp_path, WindowsAdapter())
        assert h.installer.install_all(Lockfile(), tmp_path / "project") == Ok([])
        assert (h.root / "bin").is_dir()
        assert (h.root / "shims").is_dir()


class TestUninstall:
    def test_never_installed(self, tmp_path: Path) -> None:
        h = Harness(tmp_path, WindowsAdapter())
        assert h.installer.uninstall("ghost", h.root) == Ok(False)

    def test_removes_dir_and_shim(self, tmp_path: Path) -> None:
        data = make_zip({"rg.exe": b"MZ"})
        h = Harness(tmp_path, WindowsAdapter())
        h.http.set_bytes(RG_URL, data)
        h.installer.install(locked("rg", RG_URL, data), h.root).unwrap()

        assert h.installer.uninstall("rg", h.root) == Ok(True)
        assert not (h.root / "bin" / "rg").exists()
        assert not (h.root / "shims" / "rg.bat").exists()
        assert h.installer.uninstall("rg", h.root) == Ok(False)

    def test_uninstall_all(self, tmp_path: Path) -> None:
        data = make_zip({"rg.exe": b"MZ"})
        h = Harness(tmp_path, WindowsAdapter())
        h.http.set_bytes(RG_URL, data)
        h.installer.install(locked("rg", RG_URL, data), h.root).unwrap()

        assert h.installer.uninstall_all(h.root) == Ok(None)
        assert list((h.root / "bin").iterdir()) == []
        assert list((h.root / "shims").iterdir()) == []

    def test_find_installed(self, tmp_path: Path) -> None:
        data = make_zip({"rg.exe": b"MZ"})
        h = Harness(tmp_path, WindowsAdapter())
        h.http.set_bytes(RG_URL, data)

        assert not h.installer.find_installed("rg", h.root).installed
        h.installer.install(locked("rg", RG_URL, data), h.root).unwrap()
        found = h.installer.find_installed("rg", h.root)
        assert found.executable == h.root / "bin" / "rg" / "rg.exe"
        assert found.shim == h.root / "shims" / "rg.bat"


class TestFailedReinstallKeepsExistingInstall:
    """A verification failure on reinstall leaves the previous install untouched."""

    def _installed(self, tmp_path: Path) -> tuple[Harness, LockedPackage, bytes]:
        data = make_zip({"rg.exe": b"MZ good"})
        h = Harness(tmp_path, WindowsAdapter())
        h.http.set_bytes(RG_URL, data)
        package = locked("rg", RG_URL, data)
        h.installer.install(package, h.root).unwrap()
        (h.root / "bin" / "rg" / "marker").write_text("keep", encoding="utf-8")
        shim = (h.root / "shims" / "rg.bat").read_bytes()
        return h, package, shim

    def _assert_untouched(self, h: Harness, shim: bytes) -> None:
        assert (h.root / "bin" / "rg" / "rg.exe").read_bytes() == b"MZ good"
        assert (h.root / "bin" / "rg" / "marker").read_text(encoding="utf-8") == "keep"
        assert (h.root / "shims" / "rg.bat").read_bytes() == shim

    def test_corrupt_cache_entry(self, tmp_path: Path) -> None:
        h, package, shim = self._installed(tmp_path)
        cached = h.cache.lookup(RG_URL)
        assert cached is not None
        cached.write_bytes(b"truncated")

        result = h.installer.install(package, h.root)

        assert isinstance(result, Err)
        assert isinstance(result.error, IntegrityError)
        self._assert_untouched(h, shim)

    def test_corrupt_download(self, tmp_path: Path) -> None:
        h, package, shim = self._installed(tmp_path)
        h.cache.clear_all().unwrap()
        h.http.set_bytes(RG_URL, b"tampered")

        result = h.installer.install(package, h.root)

        assert isinstance(result, Err)
        assert isinstance(result.error, IntegrityError)
        assert result.error.location == RG_URL
        self._assert_untouched(h, shim)


@posix_only
class TestRelativeRoots:
    def test_install_all_with_relative_project_root(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        data = make_tar_gz({"just-1.42.1/just": b"#!/bin/sh\n"})
        h = Harness(tmp_path, PosixAdapter())
        h.http.set_bytes(JUST_URL, data)
        (tmp_path / "proj").mkdir()
        monkeypatch.chdir(tmp_path)

        result = h.installer.install_all(Lockfile([locked("just", JUST_URL, data)]), Path("proj"))

        assert isinstance(result, Ok)
        shim = tmp_path / "proj" / ".frate" / "shims" / "just"
        assert shim.exists()
        executable = tmp_path / "proj" / ".frate" / "bin" / "just" / "just-1.42.1" / "just"
        assert shim.resolve() == executable.resolve()

    def test_install_with_relative_install_root(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        data = make_tar_gz({"just": b"#!/bin/sh\n"})
        h = Harness(tmp_path, PosixAdapter())
        h.http.set_bytes(JUST_URL, data)
        monkeypatch.chdir(tmp_path)

        result = h.installer.install(locked("just", JUST_URL, data), Path(".frate"))

        assert isinstance(result, Ok)
        assert result.value.executable.is_absolute()
        assert (tmp_path / ".frate" / "shims" / "just").exists()


class TestShimNamedAfterExecutable:
    """Tools whose executable differs from the package name (ripgrep -> rg)."""

    def _install_ripgrep(self, tmp_path: Path) -> Harness:
        data = make_zip({"ripgrep-14.1.0/rg.exe": b"MZ"})
        h = Harness(tmp_path, WindowsAdapter())
        h.http.set_bytes(RG_URL, data)
        h.installer.install(locked("ripgrep", RG_URL, data), h.root).unwrap()
        return h

    def test_find_installed_reports_shim(self, tmp_path: Path) -> None:
        h = self._install_ripgrep(tmp_path)
        assert h.installer.find_installed("ripgrep", h.root).shim == h.root / "shims" / "rg.bat"

    def test_uninstall_removes_shim(self, tmp_path: Path) -> None:
        h = self._install_ripgrep(tmp_path)

        assert h.installer.uninstall("ripgrep", h.root) == Ok(True)
        assert not (h.root / "bin" / "ripgrep").exists()
        assert not (h.root / "shims" / "rg.bat").exists()
