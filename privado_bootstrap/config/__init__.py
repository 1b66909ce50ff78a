"""
Runtime configuration and install settings.
"""

from .cache import CacheResolver, default_user_cache_root
from .configuration import (
    Configuration,
    ContainerConfiguration,
    bootstrap_configuration,
    is_developer_mode,
    parse_bool,
)
from .package_cache import PackageCacheResolver, PackageManagerKind
from .settings import InstallSettings, load_install_settings

__all__ = [
    "CacheResolver",
    "default_user_cache_root",
    "Configuration",
    "ContainerConfiguration",
    "bootstrap_configuration",
    "is_developer_mode",
    "parse_bool",
    "PackageCacheResolver",
    "PackageManagerKind",
    "InstallSettings",
    "load_install_settings",
]
