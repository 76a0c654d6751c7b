"""Registry client - per-tool release metadata.

Each tool has one JSON document in the registry:

    {
      "name": "just",
      "repo": "https://github.com/casey/just",
      "releases": {
        "1.42.1-x86_64-unknown-linux-musl": {"url": "https://...tar.gz", "hash": "sha256:..."}
      }
    }

Documents are fetched fresh on every resolution and never cached; only the
archives they point to are.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from frate.core.config import RegistryConfig
from frate.core.errors import NotFound
from frate.core.result import Err, Ok, Result
from frate.core.semver import version_sort_key
from frate.core.structured import as_str_dict, get_str, get_table

from .http import HttpClient

__all__ = ["RegistryClient", "RegistryTool", "ReleaseInfo"]


@dataclass(frozen=True, slots=True)
class ReleaseInfo:
    url: str
    hash: str


@dataclass(frozen=True, slots=True)
class RegistryTool:
    """Remote tool descriptor.

    Attributes:
        name: Canonical tool name
        repo: Source repository reference
        releases: Release key (``<version>-<triple>``) -> ReleaseInfo
    """

    name: str
    repo: str
    releases: Mapping[str, ReleaseInfo]

    def available_versions(self) -> list[str]:
        """Release keys ordered by their leading semantic version."""
        return sorted(self.releases, key=version_sort_key)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> RegistryTool:
        """Validate a registry document.

        Raises:
            ValueError: Missing or mistyped fields.
        """
        name = get_str(data, "name")
        if name is None:
            raise ValueError("missing 'name'")
        repo = get_str(data, "repo") or ""
        releases_raw = get_table(data, "releases")
        if releases_raw is None:
            raise ValueError("missing 'releases' table")

        releases: dict[str, ReleaseInfo] = {}
        for key, entry in releases_raw.items():
            table = as_str_dict(entry)
            url = get_str(table, "url") if table is not None else None
            digest = get_str(table, "hash") if table is not None else None
            if url is None or digest is None:
                raise ValueError(f"release {key!r} needs 'url' and 'hash'")
            releases[key] = ReleaseInfo(url=url, hash=digest)

        return cls(name=name, repo=repo, releases=releases)


class RegistryClient:
    """Fetches registry documents over HTTP.

    Usage:
        client = RegistryClient(RealHttpClient(), RegistryConfig())
        result = client.fetch("just")
    """

    def __init__(self, http: HttpClient, registry: RegistryConfig | None = None) -> None:
        self._http = http
        self._registry = registry or RegistryConfig()

    def url_for(self, name: str) -> str:
        return self._registry.url_for(name)

    def fetch(self, name: str) -> Result[RegistryTool, NotFound]:
        """Fetch and validate the document for ``name``."""
        url = self.url_for(name)
        result = self._http.get_json(url)
        if isinstance(result, Err):
            return Err(NotFound(tool=name, url=url, reason=result.error.message))

        document: dict[str, Any] = result.value
        try:
            return Ok(RegistryTool.from_dict(document))
        except ValueError as e:
            return Err(NotFound(tool=name, url=url, reason=f"invalid registry document: {e}"))
