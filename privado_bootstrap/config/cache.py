"""
Primary cache directory resolution.

Lookup and creation deliberately run in opposite directions. Lookup prefers
``~/.privado/.cache`` so installations that already materialized a cache
there keep using it; creation prefers the OS user cache root
(``<user cache root>/privado``) so new installations land in the idiomatic
place. Lookup never creates anything.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from platformdirs import user_cache_dir

from ..core.exceptions import CacheResolutionError
from ..core.filesystem import path_exists

logger = logging.getLogger(__name__)

CONFIG_CACHE_DIR_NAME = ".cache"
DEFAULT_CACHE_APP_NAME = "privado"


def default_user_cache_root() -> Optional[Path]:
    """
    Get the OS user cache root (e.g. ~/.cache, ~/Library/Caches, %LOCALAPPDATA%).

    Returns:
        Absolute path of the cache root, or None if the OS does not provide one
    """
    try:
        root = user_cache_dir()
    except (OSError, KeyError) as e:
        logger.debug(f"User cache root unavailable: {e}")
        return None

    if not root:
        return None
    path = Path(root)
    # An unexpanded '~' means the home directory could not be determined
    if not path.is_absolute():
        logger.debug(f"User cache root is not absolute: {root}")
        return None
    return path


def _exists(path: Path) -> bool:
    try:
        return path_exists(path)
    except OSError as e:
        raise CacheResolutionError(f"Cannot check cache directory {path}: {e}") from e


def _create(path: Path) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CacheResolutionError(f"Cannot create cache directory {path}: {e}") from e
    logger.debug(f"Created cache directory {path}")
    return path


class CacheResolver:
    """
    Resolves or creates the primary cache directory.

    Example:
        >>> resolver = CacheResolver(Path.home() / ".privado")
        >>> resolver.resolve() or resolver.create_if_absent()
        PosixPath('/home/user/.cache/privado')
    """

    def __init__(
        self,
        configuration_directory: Optional[Path],
        app_name: str = DEFAULT_CACHE_APP_NAME,
        user_cache_root: Callable[[], Optional[Path]] = default_user_cache_root,
    ):
        """
        Initialize resolver.

        Args:
            configuration_directory: ~/.privado, or None if home is unknown
            app_name: Directory name under the OS user cache root
            user_cache_root: Provider of the OS user cache root
        """
        self.configuration_directory = configuration_directory
        self.app_name = app_name
        self.user_cache_root = user_cache_root

    @property
    def config_cache_directory(self) -> Optional[Path]:
        """The cache location under the configuration directory."""
        if self.configuration_directory is None:
            return None
        return self.configuration_directory / CONFIG_CACHE_DIR_NAME

    def resolve(self) -> Optional[Path]:
        """
        Find an existing cache directory without creating anything.

        Returns:
            ``<configDir>/.cache`` if it exists, else ``<user cache root>/privado``
            if it exists, else None

        Raises:
            CacheResolutionError: If a location cannot be examined
        """
        config_cache = self.config_cache_directory
        if config_cache is not None and _exists(config_cache):
            return config_cache

        root = self.user_cache_root()
        if root is not None:
            location = root / self.app_name
            if _exists(location):
                return location

        return None

    def create_if_absent(self) -> Path:
        """
        Create the cache directory at the preferred location.

        Returns:
            ``<user cache root>/privado`` if the OS provides a cache root,
            otherwise ``<configDir>/.cache``

        Raises:
            CacheResolutionError: If no location is available or creation fails
        """
        root = self.user_cache_root()
        if root is not None:
            return _create(root / self.app_name)

        config_cache = self.config_cache_directory
        if config_cache is None:
            raise CacheResolutionError(
                "No cache location available: neither the user cache root "
                "nor the home directory could be determined"
            )
        return _create(config_cache)

    def initialize(self) -> Path:
        """Return the existing cache directory, creating one if there is none."""
        existing = self.resolve()
        if existing is not None:
            return existing
        return self.create_if_absent()
