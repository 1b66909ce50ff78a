"""
Per-package-manager dependency cache resolution.

The analysis container mounts a Maven or Gradle cache so dependency
resolution is not repeated on every scan. A user's existing ``~/.m2`` or
``~/.gradle`` is always reused; a fresh directory under the primary cache
directory is created only when neither a cached nor a user-owned one exists.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from ..core.exceptions import CacheResolutionError
from ..core.filesystem import path_exists
from .cache import CacheResolver
from .configuration import Configuration

logger = logging.getLogger(__name__)


class PackageManagerKind(Enum):
    """Build tools with a dependency cache the container can reuse."""

    M2 = "m2"
    GRADLE = "gradle"

    @classmethod
    def from_name(cls, name: str) -> "PackageManagerKind":
        """
        Map a package manager name to a kind.

        Names other than 'm2' and 'gradle' map to GRADLE.

        Example:
            >>> PackageManagerKind.from_name("sbt")
            <PackageManagerKind.GRADLE: 'gradle'>
        """
        for kind in cls:
            if kind.value == name:
                return kind
        logger.debug(f"Unknown package manager {name!r}, using gradle cache")
        return cls.GRADLE

    def directory_name(self, configuration: Configuration) -> str:
        """Cache directory name for this kind, e.g. '.m2'."""
        if self is PackageManagerKind.M2:
            return configuration.m2_cache_directory_name
        return configuration.gradle_cache_directory_name


class PackageCacheResolver:
    """
    Resolves the dependency cache directory for a package manager.

    Resolution is done on every call; results are not stored in the
    configuration.

    Example:
        >>> resolver = PackageCacheResolver(configuration)
        >>> resolver.resolve("m2")
        PosixPath('/home/user/.m2')
    """

    def __init__(
        self,
        configuration: Configuration,
        cache_resolver: Optional[CacheResolver] = None,
    ):
        self.configuration = configuration
        self.cache_resolver = cache_resolver or configuration.cache_resolver()

    def resolve(self, package_manager: Union[PackageManagerKind, str]) -> Path:
        """
        Get the cache directory for package_manager.

        Order:
        1. ``<cacheDir>/<name>`` if the primary cache is known and it exists
        2. ``<home>/<name>`` if it exists
        3. ``<cacheDir>/<name>``, creating the primary cache and the
           directory as needed

        Args:
            package_manager: PackageManagerKind or its name

        Returns:
            Path of the package cache directory

        Raises:
            CacheResolutionError: If a check or creation fails
        """
        if not isinstance(package_manager, PackageManagerKind):
            package_manager = PackageManagerKind.from_name(package_manager)
        dir_name = package_manager.directory_name(self.configuration)

        cache_dir = self.configuration.cache_directory
        if cache_dir is not None:
            cached = cache_dir / dir_name
            if self._exists(cached):
                return cached

        home = self.configuration.home_directory
        if home is not None:
            user_cache = home / dir_name
            if self._exists(user_cache):
                logger.debug(f"Reusing existing {package_manager.value} cache {user_cache}")
                return user_cache

        if cache_dir is None:
            cache_dir = self.cache_resolver.create_if_absent()

        location = cache_dir / dir_name
        try:
            location.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheResolutionError(
                f"Cannot create package cache directory {location}: {e}"
            ) from e

        logger.debug(f"Using package cache {location}")
        return location

    @staticmethod
    def _exists(path: Path) -> bool:
        try:
            return path_exists(path)
        except OSError as e:
            raise CacheResolutionError(f"Cannot check {path}: {e}") from e
