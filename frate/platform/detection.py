"""Host platform detection and target triples.

Release keys in the registry are ``<version>-<target triple>``. The triple is
derived from the host CPU architecture and OS through a fixed table; hosts
outside the table get ``<arch>-unknown-<os>``.
"""

from __future__ import annotations

import os as _os
import platform as _platform
import re
import sys as _sys
from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache

__all__ = [
    "Platform",
    "HostInfo",
    "detect",
    "expand_version",
]


class Platform(Enum):
    """Operating system family."""

    LINUX = auto()
    MACOS = auto()
    WINDOWS = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()


_TARGET_TRIPLES: dict[tuple[str, str], str] = {
    ("x86_64", "linux"): "x86_64-unknown-linux-gnu",
    ("x86", "windows"): "i686-pc-windows-msvc",
    ("x86_64", "windows"): "x86_64-pc-windows-msvc",
    ("aarch64", "linux"): "aarch64-unknown-linux-gnu",
    ("aarch64", "macos"): "aarch64-apple-darwin",
    ("x86_64", "macos"): "x86_64-apple-darwin",
}

_ARCH_ALIASES: dict[str, str] = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "x86": "x86",
    "i386": "x86",
    "i686": "x86",
}


@dataclass(frozen=True, slots=True)
class HostInfo:
    """Normalized host description.

    Attributes:
        os: "linux", "macos", "windows", or the raw platform name
        arch: "x86_64", "x86", "aarch64", or the raw machine name
    """

    os: str
    arch: str

    @property
    def platform(self) -> Platform:
        match self.os:
            case "linux":
                return Platform.LINUX
            case "macos":
                return Platform.MACOS
            case "windows":
                return Platform.WINDOWS
            case _:
                return Platform.UNKNOWN

    @property
    def target_triple(self) -> str:
        return _TARGET_TRIPLES.get((self.arch, self.os), f"{self.arch}-unknown-{self.os}")

    def __str__(self) -> str:
        return f"{self.arch}-{self.os}"


def normalize_os(system: str) -> str:
    system = system.lower()
    if system.startswith("linux"):
        return "linux"
    if system.startswith("darwin"):
        return "macos"
    if system.startswith(("win32", "cygwin", "msys")):
        return "windows"
    # e.g. "freebsd14" -> "freebsd"
    return re.sub(r"\d+$", "", system) or system


def normalize_arch(machine: str) -> str:
    machine = machine.lower()
    return _ARCH_ALIASES.get(machine, machine)


@lru_cache(maxsize=1)
def detect() -> HostInfo:
    """Detect the current host (cached)."""
    os_name = normalize_os(_sys.platform)
    # NOTE: platform.machine() may query WMI on Windows (slow/hangs).
    if os_name == "windows":
        machine = (
            _os.environ.get("PROCESSOR_ARCHITEW6432")
            or _os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        )
    else:
        machine = _platform.machine()
    return HostInfo(os=os_name, arch=normalize_arch(machine))


def expand_version(version: str, host: HostInfo | None = None) -> str:
    """Append the host target triple: ``1.42.1`` -> ``1.42.1-x86_64-unknown-linux-gnu``."""
    host = host or detect()
    return f"{version}-{host.target_triple}"
