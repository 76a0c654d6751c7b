"""The lockfile, ``frate.lock``.

An exact snapshot of the manifest: one ``[[package]]`` record per tool with
the resolved release key, archive URL and content hash.

    [[package]]
    name = "just"
    version = "1.42.1"
    source = "https://github.com/casey/just/releases/download/1.42.1/just-1.42.1-x86_64-unknown-linux-musl.tar.gz"
    hash = "sha256:..."

``sync`` rebuilds the whole snapshot from the manifest; it never merges with
the previous contents.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import tomlkit

from frate.platform.files import atomic_write_text

from .digest import normalize_hash
from .errors import FilesystemError
from .result import Err, Ok, Result
from .structured import as_str_dict, get_list, get_str

if TYPE_CHECKING:
    from frate.output.console import ConsoleProtocol
    from frate.tools.resolver import DependencyResolver

    from .manifest import Manifest

__all__ = ["LOCK_FILE", "LockedPackage", "Lockfile"]

LOCK_FILE = "frate.lock"


@dataclass(frozen=True, slots=True)
class LockedPackage:
    """One resolved tool.

    Attributes:
        name: Tool name
        version: Exact version; the target triple lives only in ``source``
        source: Archive download URL
        hash: Hex SHA-256, optionally tagged ``sha256:``
    """

    name: str
    version: str
    source: str
    hash: str

    @property
    def digest(self) -> str:
        """Hash without the algorithm tag."""
        return normalize_hash(self.hash)


def _empty_packages() -> list[LockedPackage]:
    return []


@dataclass(slots=True)
class Lockfile:
    packages: list[LockedPackage] = field(default_factory=_empty_packages)

    def get(self, name: str) -> LockedPackage | None:
        for package in self.packages:
            if package.name == name:
                return package
        return None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __len__(self) -> int:
        return len(self.packages)

    def sync(
        self,
        manifest: Manifest,
        resolver: DependencyResolver,
        console: ConsoleProtocol,
    ) -> None:
        """Replace every entry by re-resolving the manifest.

        A dependency that fails to resolve is reported as a warning and left
        out of the new snapshot; the remaining dependencies are still
        resolved.
        """
        self.packages.clear()
        for name, version in manifest.dependencies.items():
            result = resolver.resolve(name, version)
            if isinstance(result, Err):
                console.warning(f"Failed to resolve {name}@{version}: {result.error.message}")
                continue

            resolved = result.value
            if resolved.name in self:
                console.debug(f"Skipping duplicate package {resolved.name}")
                continue
            self.packages.append(
                LockedPackage(
                    name=resolved.name,
                    version=resolved.version,
                    source=resolved.url,
                    hash=resolved.hash,
                )
            )
            console.debug(f"Locked {resolved.name} {resolved.key}")

    def to_toml(self) -> str:
        doc = tomlkit.document()
        records = tomlkit.aot()
        for package in self.packages:
            record = tomlkit.table()
            record.add("name", package.name)
            record.add("version", package.version)
            record.add("source", package.source)
            record.add("hash", package.hash)
            records.append(record)
        doc.add("package", records)
        return tomlkit.dumps(doc)

    def save(self, path: Path) -> Result[None, FilesystemError]:
        try:
            atomic_write_text(path, self.to_toml())
        except OSError as e:
            return Err(FilesystemError(path, f"Could not write lockfile ({e})"))
        return Ok(None)

    @classmethod
    def loads(cls, text: str) -> Lockfile:
        """Parse lockfile text.

        Raises:
            ValueError: Invalid TOML or malformed package records.
        """
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(str(e)) from e

        packages: list[LockedPackage] = []
        for raw in get_list(data, "package") or []:
            record = as_str_dict(raw)
            if record is None:
                raise ValueError("package entries must be tables")
            fields = {key: get_str(record, key) for key in ("name", "version", "source", "hash")}
            missing = [key for key, value in fields.items() if value is None]
            if missing:
                raise ValueError(f"package record missing {', '.join(missing)}")
            packages.append(
                LockedPackage(
                    name=fields["name"] or "",
                    version=fields["version"] or "",
                    source=fields["source"] or "",
                    hash=fields["hash"] or "",
                )
            )
        return cls(packages=packages)

    @classmethod
    def load_or_default(cls, path: Path) -> Lockfile:
        """Lockfile at ``path``, or an empty one if missing or unreadable."""
        try:
            return cls.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValueError):
            return cls()
