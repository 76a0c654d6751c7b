"""Platform abstraction layer."""

from .adapter import PlatformAdapter, PosixAdapter, WindowsAdapter, select_adapter
from .detection import HostInfo, Platform, detect, expand_version
from .paths import GlobalPaths, user_cache_dir, user_config_dir, user_data_dir

__all__ = [
    # adapter
    "PlatformAdapter",
    "PosixAdapter",
    "WindowsAdapter",
    "select_adapter",
    # detection
    "HostInfo",
    "Platform",
    "detect",
    "expand_version",
    # paths
    "GlobalPaths",
    "user_cache_dir",
    "user_config_dir",
    "user_data_dir",
]
