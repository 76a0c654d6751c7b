"""Resolution of a manifest entry into an exact release.

Resolution is single-shot: ``<version>-<host triple>`` is looked up
verbatim in the tool's release table. The only fallback swaps the libc
variant (``musl`` <-> ``gnu``) once. There is no range matching.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from frate.core.errors import ResolveError, VersionNotFound
from frate.core.result import Err, Ok, Result
from frate.platform.detection import HostInfo, detect, expand_version

from .registry import RegistryClient, ReleaseInfo

__all__ = ["DependencyResolver", "ResolvedDependency", "Resolver", "candidate_keys"]


@dataclass(frozen=True, slots=True)
class ResolvedDependency:
    """Exact, lockable release.

    Attributes:
        name: Tool name as published by the registry
        version: Bare version that was requested
        key: Release key that matched (version plus target triple)
        url: Archive URL, verbatim from the registry
        hash: Content hash, verbatim from the registry
    """

    name: str
    version: str
    key: str
    url: str
    hash: str


class DependencyResolver(Protocol):
    def resolve(self, tool_name: str, version: str) -> Result[ResolvedDependency, ResolveError]:
        ...


def candidate_keys(full_version: str) -> tuple[str, ...]:
    """Release keys to try, in order: the exact key, then the other libc variant."""
    if "musl" in full_version:
        return (full_version, full_version.replace("musl", "gnu"))
    if "gnu" in full_version:
        return (full_version, full_version.replace("gnu", "musl"))
    return (full_version,)


class Resolver:
    """Resolves ``(tool, version)`` against the registry for one host."""

    def __init__(self, registry: RegistryClient, host: HostInfo | None = None) -> None:
        self._registry = registry
        self._host = host or detect()

    @property
    def host(self) -> HostInfo:
        return self._host

    def resolve(self, tool_name: str, version: str) -> Result[ResolvedDependency, ResolveError]:
        fetched = self._registry.fetch(tool_name)
        if isinstance(fetched, Err):
            return fetched
        tool = fetched.value

        keys = candidate_keys(expand_version(version, self._host))
        for key in keys:
            release: ReleaseInfo | None = tool.releases.get(key)
            if release is not None:
                return Ok(
                    ResolvedDependency(
                        name=tool.name,
                        version=version,
                        key=key,
                        url=release.url,
                        hash=release.hash,
                    )
                )

        return Err(VersionNotFound(tool=tool.name, tried=keys))
