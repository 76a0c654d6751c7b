"""Archive extraction.

Supports ``.tar.gz`` and ``.zip``. The archive kind is decided from the
source URL alone, before anything is downloaded. Extraction replaces the
destination directory; a failure part-way leaves it partially populated.
"""

from __future__ import annotations

import contextlib
import io
import os
import shutil
import stat
import tarfile
import zipfile
from enum import Enum
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

from frate.core.errors import FilesystemError, UnsupportedArchiveType
from frate.core.result import Err, Ok, Result

__all__ = ["ArchiveKind", "archive_kind", "extract_archive"]


class ArchiveKind(Enum):
    TAR_GZ = ".tar.gz"
    ZIP = ".zip"

    def __str__(self) -> str:
        return self.value


def archive_kind(source: str) -> Result[ArchiveKind, UnsupportedArchiveType]:
    """Pick the extractor from the URL (or file name) suffix."""
    name = PurePosixPath(urlparse(source).path).name.lower()
    if name.endswith(".tar.gz"):
        return Ok(ArchiveKind.TAR_GZ)
    if name.endswith(".zip"):
        return Ok(ArchiveKind.ZIP)
    return Err(UnsupportedArchiveType(source))


def _safe_relative_path(member_name: str) -> Path | None:
    """Sanitized relative extraction path, or None if the member escapes the root."""
    normalized = member_name.replace("\\", "/")
    if normalized.startswith("/"):
        return None

    parts = [part for part in PurePosixPath(normalized).parts if part != "."]
    if not parts:
        return None
    if any(part in {"", ".."} for part in parts):
        return None
    if parts[0].endswith(":"):
        return None
    return Path(*parts)


def _reset_dir(dest: Path) -> Path:
    if dest.exists():
        shutil.rmtree(dest)
    dest.mkdir(parents=True, exist_ok=True)
    return dest.resolve()


def _is_within_root(root: Path, target: Path) -> bool:
    try:
        return target.resolve().is_relative_to(root)
    except OSError:
        return False


def _extract_tar_gz(data: bytes, dest: Path) -> int:
    root = _reset_dir(dest)
    count = 0
    with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as tar:
        for member in tar.getmembers():
            # Regular files only: skip dirs, links, devices, fifos
            if not member.isreg():
                continue
            rel_path = _safe_relative_path(member.name)
            if rel_path is None:
                continue
            full_path = dest / rel_path
            if not _is_within_root(root, full_path):
                continue
            src = tar.extractfile(member)
            if src is None:
                continue

            full_path.parent.mkdir(parents=True, exist_ok=True)
            with src, open(full_path, "wb") as dst:
                shutil.copyfileobj(src, dst)

            mode = member.mode & 0o777
            if mode:
                with contextlib.suppress(OSError):
                    os.chmod(full_path, mode)
            count += 1
    return count


def _extract_zip(data: bytes, dest: Path) -> int:
    root = _reset_dir(dest)
    count = 0
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        for info in zf.infolist():
            if info.is_dir():
                continue
            unix_attrs = info.external_attr >> 16
            if stat.S_IFMT(unix_attrs) == stat.S_IFLNK:
                continue
            rel_path = _safe_relative_path(info.filename)
            if rel_path is None:
                continue
            full_path = dest / rel_path
            if not _is_within_root(root, full_path):
                continue

            full_path.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(info) as src, open(full_path, "wb") as dst:
                shutil.copyfileobj(src, dst)

            mode = unix_attrs & 0o777
            if mode:
                with contextlib.suppress(OSError):
                    os.chmod(full_path, mode)
            count += 1
    return count


def extract_archive(data: bytes, kind: ArchiveKind, dest: Path) -> Result[int, FilesystemError]:
    """Unpack ``data`` into ``dest`` (replacing it).

    Returns:
        Ok with the number of files written
    """
    try:
        match kind:
            case ArchiveKind.TAR_GZ:
                return Ok(_extract_tar_gz(data, dest))
            case ArchiveKind.ZIP:
                return Ok(_extract_zip(data, dest))
            case _:
                raise AssertionError(f"unexpected archive kind: {kind}")
    except (tarfile.TarError, EOFError) as e:
        return Err(FilesystemError(dest, f"Tar extraction failed ({e})"))
    except zipfile.BadZipFile as e:
        return Err(FilesystemError(dest, f"Invalid zip file ({e})"))
    except OSError as e:
        return Err(FilesystemError(dest, f"IO error during extraction ({e})"))
