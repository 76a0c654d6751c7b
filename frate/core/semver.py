from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = ["SemVer", "parse_version", "is_valid_version", "version_sort_key"]


_VERSION_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-([0-9A-Za-z.-]+))?"
    r"(?:\+([0-9A-Za-z.-]+))?$"
)


@dataclass(frozen=True, slots=True, order=True)
class SemVer:
    """Release core of a semantic version.

    Pre-release and build suffixes are accepted by the parser but not part
    of the ordering.
    """

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(version: str) -> SemVer | None:
    m = _VERSION_RE.match(version.strip())
    if m is None:
        return None
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def is_valid_version(version: str) -> bool:
    """True for bare versions like ``1.42.1`` or ``1.0.0-rc.1``; no ``v`` prefix, no ranges."""
    return parse_version(version) is not None


def version_sort_key(release_key: str) -> tuple[int, int, int, int]:
    """Sort key for registry release keys (``1.42.1-x86_64-unknown-linux-gnu``).

    Keys whose leading segment is not a version sort first.
    """
    head = release_key.split("-", 1)[0]
    parsed = parse_version(head)
    if parsed is None:
        return (0, 0, 0, 0)
    return (1, parsed.major, parsed.minor, parsed.patch)
