"""Typed loading of the optional user configuration file.

Location: ``<user-config-dir>/config.toml`` (see ``frate.platform.paths``).
Every key is optional:

  [registry]
  url = "https://example.com/registry/{name}.json"

  [http]
  timeout = 30.0
  user_agent = "frate/0.3.0"

  [paths]
  cache = "~/frate-cache"
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from frate import __version__

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_str, get_table

__all__ = [
    "DEFAULT_REGISTRY_URL",
    "Config",
    "ConfigError",
    "HttpConfig",
    "PathsConfig",
    "RegistryConfig",
    "load_config",
]

DEFAULT_REGISTRY_URL = (
    "https://raw.githubusercontent.com/konni332/frate-registry/refs/heads/master/tools/{name}.json"
)
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = f"frate/{__version__}"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class RegistryConfig:
    """Where registry documents are fetched from; ``{name}`` is the tool name."""

    url: str = DEFAULT_REGISTRY_URL

    def url_for(self, name: str) -> str:
        return self.url.replace("{name}", name)


@dataclass(frozen=True, slots=True)
class HttpConfig:
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT


@dataclass(frozen=True, slots=True)
class PathsConfig:
    """Overrides for per-user directories (None keeps the platform default)."""

    cache: str | None = None

    def cache_dir(self, default: Path) -> Path:
        if self.cache is None:
            return default
        return Path(self.cache).expanduser()


@dataclass(frozen=True, slots=True)
class Config:
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from parsed TOML.

        Raises:
            ValueError: On values of the right type but unusable content.
        """
        registry: StrDict = get_table(data, "registry") or {}
        http: StrDict = get_table(data, "http") or {}
        paths: StrDict = get_table(data, "paths") or {}

        url = get_str(registry, "url") or DEFAULT_REGISTRY_URL
        if "{name}" not in url:
            raise ValueError("registry.url must contain a {name} placeholder")

        timeout = get_float(http, "timeout")
        if timeout is not None and timeout <= 0:
            raise ValueError("http.timeout must be positive")

        return cls(
            registry=RegistryConfig(url=url),
            http=HttpConfig(
                timeout=timeout if timeout is not None else DEFAULT_TIMEOUT,
                user_agent=get_str(http, "user_agent") or DEFAULT_USER_AGENT,
            ),
            paths=PathsConfig(cache=get_str(paths, "cache")),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    try:
        content = path.read_bytes()
        data = as_str_dict(tomllib.loads(content.decode("utf-8")))
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and validate ``config.toml``."""
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except ValueError as e:
        return Err(ConfigError(f"Invalid config: {e}", path=path))
