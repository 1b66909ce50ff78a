"""
Tests for package manager cache resolution.
"""

import errno
import pytest
from pathlib import Path
from unittest.mock import patch

from privado_bootstrap.config.cache import CacheResolver
from privado_bootstrap.config.configuration import bootstrap_configuration
from privado_bootstrap.config.package_cache import (
    PackageCacheResolver,
    PackageManagerKind,
)
from privado_bootstrap.core.exceptions import CacheResolutionError


@pytest.fixture
def home(tmp_path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def user_cache_root(tmp_path) -> Path:
    path = tmp_path / "user-cache"
    path.mkdir()
    return path


@pytest.fixture
def configuration(home, tmp_path):
    """Configuration with an unresolved cache directory."""
    return bootstrap_configuration(
        environ={},
        argv0="/usr/local/bin/privado",
        temp_dir=str(tmp_path / "systmp"),
        home=home,
        resolve_cache=False,
    )


def resolver(configuration, root):
    return PackageCacheResolver(
        configuration,
        cache_resolver=CacheResolver(
            configuration.configuration_directory, user_cache_root=lambda: root
        ),
    )


class TestPackageManagerKind:
    """Test PackageManagerKind."""

    def test_known_names(self):
        """Test m2 and gradle map to their kinds."""
        assert PackageManagerKind.from_name("m2") is PackageManagerKind.M2
        assert PackageManagerKind.from_name("gradle") is PackageManagerKind.GRADLE

    @pytest.mark.parametrize("name", ["sbt", "npm", "", "M2"])
    def test_unknown_names_are_gradle(self, name):
        """Test anything else maps to gradle."""
        assert PackageManagerKind.from_name(name) is PackageManagerKind.GRADLE

    def test_directory_names(self, configuration):
        """Test cache directory names come from the configuration."""
        assert PackageManagerKind.M2.directory_name(configuration) == ".m2"
        assert PackageManagerKind.GRADLE.directory_name(configuration) == ".gradle"


class TestPackageCacheResolver:
    """Test PackageCacheResolver.resolve()."""

    def test_existing_user_m2_is_reused(self, configuration, home, user_cache_root):
        """Test ~/.m2 is returned when no primary cache is resolved."""
        (home / ".m2").mkdir()

        result = resolver(configuration, user_cache_root).resolve("m2")

        assert result == home / ".m2"
        assert not (user_cache_root / "privado").exists()
        assert configuration.cache_directory is None

    def test_cached_copy_preferred(self, configuration, home, tmp_path):
        """Test <cacheDir>/.m2 wins over ~/.m2 when both exist."""
        cache_dir = tmp_path / "cache"
        (cache_dir / ".m2").mkdir(parents=True)
        (home / ".m2").mkdir()
        configuration.cache_directory = cache_dir

        assert resolver(configuration, None).resolve(PackageManagerKind.M2) == cache_dir / ".m2"

    def test_user_cache_before_creating(self, configuration, home, tmp_path):
        """Test ~/.gradle beats creating <cacheDir>/.gradle."""
        cache_dir = tmp_path / "cache"
        cache_dir.mkdir()
        (home / ".gradle").mkdir()
        configuration.cache_directory = cache_dir

        assert resolver(configuration, None).resolve("gradle") == home / ".gradle"
        assert not (cache_dir / ".gradle").exists()

    def test_creates_under_new_primary_cache(self, configuration, user_cache_root):
        """Test the primary cache is created when unresolved."""
        result = resolver(configuration, user_cache_root).resolve("m2")

        assert result == user_cache_root / "privado" / ".m2"
        assert result.is_dir()

    def test_creates_under_resolved_primary_cache(self, configuration, tmp_path):
        """Test the package directory is created under a known cache."""
        cache_dir = tmp_path / "cache"
        cache_dir.mkdir()
        configuration.cache_directory = cache_dir

        result = resolver(configuration, None).resolve("gradle")

        assert result == cache_dir / ".gradle"
        assert result.is_dir()

    def test_unknown_name_behaves_like_gradle(self, configuration, home, user_cache_root):
        """Test an unrecognized name resolves exactly like gradle."""
        (home / ".gradle").mkdir()
        package_resolver = resolver(configuration, user_cache_root)

        assert package_resolver.resolve("maven") == package_resolver.resolve("gradle")

    def test_results_not_cached(self, configuration, home, user_cache_root):
        """Test each call re-resolves."""
        package_resolver = resolver(configuration, user_cache_root)
        created = package_resolver.resolve("m2")
        (home / ".m2").mkdir()

        created.rmdir()

        assert package_resolver.resolve("m2") == home / ".m2"

    def test_creation_failure(self, configuration, tmp_path):
        """Test a primary cache that is not a directory raises CacheResolutionError."""
        cache_dir = tmp_path / "cache"
        cache_dir.write_text("not a directory")
        configuration.cache_directory = cache_dir

        with pytest.raises(CacheResolutionError):
            resolver(configuration, None).resolve("m2")

    def test_check_failure(self, configuration, tmp_path):
        """Test an unexaminable location raises CacheResolutionError."""
        configuration.cache_directory = tmp_path / "cache"
        denied = OSError(errno.EACCES, "Permission denied")

        with patch("privado_bootstrap.core.filesystem.os.stat", side_effect=denied):
            with pytest.raises(CacheResolutionError, match="Cannot check"):
                resolver(configuration, None).resolve("m2")
