"""The project manifest, ``frate.toml``.

    [project]
    name = "my-project"
    version = "0.1.0"

    [dependencies]
    just = "1.42.1"

Dependency versions are bare semantic versions naming an exact release;
there are no range operators.
"""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import tomlkit

from frate.platform.files import atomic_write_text

from .errors import FilesystemError, InvalidRequirement, InvalidVersion, ManifestError
from .result import Err, Ok, Result
from .semver import is_valid_version
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = ["MANIFEST_FILE", "Manifest", "parse_requirement", "validate_tool_name"]

MANIFEST_FILE = "frate.toml"
DEFAULT_PROJECT_VERSION = "0.1.0"

_TOOL_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def validate_tool_name(name: str) -> Result[str, InvalidRequirement]:
    if not _TOOL_NAME_RE.match(name):
        return Err(InvalidRequirement(name, "tool names use letters, digits, '.', '_' and '-'"))
    return Ok(name)


def parse_requirement(text: str) -> Result[tuple[str, str], InvalidRequirement | InvalidVersion]:
    """Split ``<name>@<version>`` and validate both halves."""
    name, sep, version = text.strip().partition("@")
    if not sep or not name or not version:
        return Err(InvalidRequirement(text, "expected <name>@<version>"))

    name_result = validate_tool_name(name)
    if isinstance(name_result, Err):
        return name_result
    if not is_valid_version(version):
        return Err(InvalidVersion(version))
    return Ok((name, version))


def _empty_dependencies() -> dict[str, str]:
    return {}


@dataclass(slots=True)
class Manifest:
    """In-memory ``frate.toml``.

    Attributes:
        name: Project name
        version: Project version
        dependencies: Tool name -> exact version
    """

    name: str
    version: str = DEFAULT_PROJECT_VERSION
    dependencies: dict[str, str] = field(default_factory=_empty_dependencies)

    @classmethod
    def default(cls, name: str) -> Manifest:
        """Fresh manifest for ``frate init``."""
        return cls(name=name)

    def add(self, name: str, version: str) -> Result[None, InvalidRequirement | InvalidVersion]:
        """Declare (or re-pin) a tool."""
        name_result = validate_tool_name(name)
        if isinstance(name_result, Err):
            return name_result
        if not is_valid_version(version):
            return Err(InvalidVersion(version))
        self.dependencies[name] = version
        return Ok(None)

    def remove(self, name: str) -> bool:
        """Drop a tool; False if it was not declared."""
        return self.dependencies.pop(name, None) is not None

    def to_toml(self) -> str:
        doc = tomlkit.document()

        project = tomlkit.table()
        project.add("name", self.name)
        project.add("version", self.version)
        doc.add("project", project)

        dependencies = tomlkit.table()
        for tool, version in self.dependencies.items():
            dependencies.add(tool, version)
        doc.add("dependencies", dependencies)

        return tomlkit.dumps(doc)

    def save(self, path: Path) -> Result[None, FilesystemError]:
        try:
            atomic_write_text(path, self.to_toml())
        except OSError as e:
            return Err(FilesystemError(path, f"Could not write manifest ({e})"))
        return Ok(None)

    @classmethod
    def from_dict(cls, data: StrDict) -> Manifest:
        """Build from parsed TOML.

        Raises:
            ValueError: Missing project table or invalid dependency entries.
        """
        project = get_table(data, "project")
        if project is None:
            raise ValueError("missing [project] table")
        name = get_str(project, "name")
        if name is None:
            raise ValueError("missing project.name")
        version = get_str(project, "version") or DEFAULT_PROJECT_VERSION

        dependencies: dict[str, str] = {}
        for tool, value in (get_table(data, "dependencies") or {}).items():
            if not isinstance(value, str):
                raise ValueError(f"dependency {tool!r} must be a version string")
            if not _TOOL_NAME_RE.match(tool):
                raise ValueError(f"invalid tool name {tool!r}")
            if not is_valid_version(value):
                raise ValueError(f"dependency {tool!r} has invalid version {value!r}")
            dependencies[tool] = value.strip()

        return cls(name=name, version=version, dependencies=dependencies)

    @classmethod
    def load(cls, path: Path) -> Result[Manifest, ManifestError]:
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return Err(ManifestError(path, "file not found"))
        except OSError as e:
            return Err(ManifestError(path, str(e)))

        try:
            data = as_str_dict(tomllib.loads(raw.decode("utf-8")))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            return Err(ManifestError(path, f"invalid TOML: {e}"))
        if data is None:
            return Err(ManifestError(path, "root must be a TOML table"))

        try:
            return Ok(cls.from_dict(data))
        except ValueError as e:
            return Err(ManifestError(path, str(e)))
