from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from frate.core.config import Config, load_config
from frate.core.project import Project, find_project
from frate.core.result import Err
from frate.output.console import ConsoleProtocol, RichConsole
from frate.output.errors import error_exit_code, print_error
from frate.platform.adapter import PlatformAdapter, select_adapter
from frate.platform.detection import HostInfo, detect
from frate.platform.paths import GlobalPaths
from frate.tools.cache import ArchiveCache
from frate.tools.http import HttpClient, RealHttpClient
from frate.tools.installer import Installer
from frate.tools.registry import RegistryClient
from frate.tools.resolver import Resolver

# Set by the root callback (--project / --verbose).
PROJECT_ROOT_ENV = "FRATE_PROJECT_ROOT"
VERBOSE_ENV = "FRATE_VERBOSE"


@dataclass(frozen=True, slots=True)
class CLIContext:
    project: Project
    host: HostInfo
    paths: GlobalPaths
    config: Config
    console: ConsoleProtocol
    adapter: PlatformAdapter
    http: HttpClient

    @property
    def cache(self) -> ArchiveCache:
        return ArchiveCache(self.config.paths.cache_dir(self.paths.cache))

    def resolver(self) -> Resolver:
        return Resolver(RegistryClient(self.http, self.config.registry), self.host)

    def installer(self) -> Installer:
        return Installer(self.http, self.cache, self.adapter, self.console)


def make_console() -> ConsoleProtocol:
    return RichConsole(verbose=os.environ.get(VERBOSE_ENV) == "1")


def make_http_client(config: Config) -> HttpClient:
    return RealHttpClient(timeout=config.http.timeout, user_agent=config.http.user_agent)


def start_dir() -> Path:
    override = os.environ.get(PROJECT_ROOT_ENV)
    return Path(override) if override else Path.cwd()


def load_user_config(paths: GlobalPaths, console: ConsoleProtocol) -> Config:
    """User config.toml, or defaults (with a warning) if it is invalid."""
    if not paths.config_file.exists():
        return Config()
    result = load_config(paths.config_file)
    if isinstance(result, Err):
        console.warning(f"{result.error.message} (using defaults)")
        return Config()
    return result.value


def global_cache(console: ConsoleProtocol) -> ArchiveCache:
    """Archive cache without requiring a project."""
    paths = GlobalPaths.detect()
    config = load_user_config(paths, console)
    return ArchiveCache(config.paths.cache_dir(paths.cache))


def build_context(*, project: Project | None = None) -> CLIContext:
    """Everything a command needs; exits if no frate.toml can be found."""
    console = make_console()

    if project is None:
        found = find_project(start_dir())
        if isinstance(found, Err):
            print_error(found.error, console)
            raise typer.Exit(code=error_exit_code(found.error))
        project = found.value

    paths = GlobalPaths.detect()
    config = load_user_config(paths, console)
    return CLIContext(
        project=project,
        host=detect(),
        paths=paths,
        config=config,
        console=console,
        adapter=select_adapter(),
        http=make_http_client(config),
    )
