"""The resolve -> lock -> install pipeline.

- HTTP client (http.py)
- Registry documents and resolution (registry.py, resolver.py)
- Archive cache, extraction and executable lookup (cache.py, extract.py, locate.py)
- Shims and installation (shims.py, installer.py)
"""

from frate.tools.cache import ArchiveCache, archive_name
from frate.tools.extract import ArchiveKind, archive_kind, extract_archive
from frate.tools.http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from frate.tools.installer import InstalledPaths, Installer, InstallResult
from frate.tools.locate import find_primary_executable
from frate.tools.registry import RegistryClient, RegistryTool, ReleaseInfo
from frate.tools.resolver import DependencyResolver, ResolvedDependency, Resolver
from frate.tools.shims import ShimManager, create_shim

__all__ = [
    # Cache
    "ArchiveCache",
    "archive_name",
    # Extraction
    "ArchiveKind",
    "archive_kind",
    "extract_archive",
    "find_primary_executable",
    # HTTP
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # Install
    "InstalledPaths",
    "Installer",
    "InstallResult",
    # Registry / resolve
    "DependencyResolver",
    "RegistryClient",
    "RegistryTool",
    "ReleaseInfo",
    "ResolvedDependency",
    "Resolver",
    # Shims
    "ShimManager",
    "create_shim",
]
