"""Locating the primary executable of an extracted archive.

Best-effort heuristic, not a guarantee. Archives rarely declare their entry
point, so every executable file is a candidate and candidates are split in
two buckets:

- rank 0: the file stem matches the tool name at a word boundary
  (``just``, ``just-cli``, ``x-just``), case-insensitive
- rank 10: everything else

The lowest rank wins; ties go to the lexicographically first path.
"""

from __future__ import annotations

import re
from pathlib import Path

from frate.core.errors import BinaryNotFound
from frate.core.result import Err, Ok, Result
from frate.platform.adapter import PlatformAdapter

__all__ = ["executable_candidates", "find_primary_executable", "rank_candidate"]

NAME_MATCH_RANK = 0
OTHER_RANK = 10


def executable_candidates(root: Path, adapter: PlatformAdapter) -> list[Path]:
    """Regular (non-symlink) executable files below ``root``."""
    if not root.is_dir():
        return []
    return [
        path
        for path in root.rglob("*")
        if path.is_file() and not path.is_symlink() and adapter.is_executable(path)
    ]


def rank_candidate(path: Path, name: str) -> int:
    pattern = re.compile(rf"\b{re.escape(name.lower())}")
    return NAME_MATCH_RANK if pattern.search(path.stem.lower()) else OTHER_RANK


def find_primary_executable(
    root: Path, name: str, adapter: PlatformAdapter
) -> Result[Path, BinaryNotFound]:
    """Pick the executable a shim for tool ``name`` should point at."""
    candidates = executable_candidates(root, adapter)
    if not candidates:
        return Err(BinaryNotFound(tool=name, searched=root))
    candidates.sort(key=lambda p: (rank_candidate(p, name), p.as_posix()))
    return Ok(candidates[0])
