"""Archive cache - downloaded archives shared by every project of the user.

Entries are keyed by the archive file name (the last path segment of the
source URL) and live directly under the cache root:

    <user-cache-dir>/just-1.42.1-x86_64-unknown-linux-musl.tar.gz

The cache does not verify what it stores; the installer hashes cached bytes
before every use. Writes are plain overwrites, so an interrupted write
leaves a truncated entry that the next install rejects with a hash
mismatch.
"""

from __future__ import annotations

import shutil
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

from frate.core.errors import FilesystemError
from frate.core.result import Err, Ok, Result

__all__ = ["ArchiveCache", "archive_name"]


def archive_name(url: str) -> str:
    """Cache key for ``url``: its final path segment ("" if there is none)."""
    return PurePosixPath(urlparse(url).path).name


class ArchiveCache:
    """Content store for downloaded archives.

    Usage:
        cache = ArchiveCache(paths.cache)
        cached = cache.lookup(package.source)
    """

    def __init__(self, cache_dir: Path) -> None:
        self._cache_dir = cache_dir

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def path_for(self, url: str) -> Path | None:
        name = archive_name(url)
        return self._cache_dir / name if name else None

    def lookup(self, url: str) -> Path | None:
        """Cached archive for ``url``, if present (no hash check)."""
        path = self.path_for(url)
        if path is None or not path.is_file():
            return None
        return path

    def store(self, url: str, data: bytes) -> Result[Path, FilesystemError]:
        """Write ``data`` as the entry for ``url``, replacing any previous entry."""
        path = self.path_for(url)
        if path is None:
            return Err(FilesystemError(Path(url), "Could not determine archive name"))
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            return Err(FilesystemError(path, f"Could not write cache file ({e})"))
        return Ok(path)

    def entries(self) -> list[Path]:
        """All cached files, sorted."""
        if not self._cache_dir.is_dir():
            return []
        return sorted(p for p in self._cache_dir.rglob("*") if p.is_file())

    def _matching(self, substring: str) -> list[Path]:
        # Match on the path relative to the root so the root's own name never matches.
        return [
            p for p in self.entries() if substring in p.relative_to(self._cache_dir).as_posix()
        ]

    def contains(self, substring: str) -> bool:
        """True if any cached path contains ``substring`` (for status display)."""
        return bool(self._matching(substring))

    def evict(self, substring: str) -> Result[int, FilesystemError]:
        """Remove every entry whose path contains ``substring``.

        Deliberately broad: ``evict("just")`` drops every cached variant of
        ``just``.

        Returns:
            Ok with the number of files removed
        """
        removed = 0
        for path in self._matching(substring):
            try:
                path.unlink()
            except OSError as e:
                return Err(FilesystemError(path, f"Could not remove cache file ({e})"))
            removed += 1
        return Ok(removed)

    def clear_all(self) -> Result[None, FilesystemError]:
        """Delete the whole cache root and recreate it empty."""
        try:
            if self._cache_dir.exists():
                shutil.rmtree(self._cache_dir)
            self._cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Err(FilesystemError(self._cache_dir, f"Could not clear cache ({e})"))
        return Ok(None)
