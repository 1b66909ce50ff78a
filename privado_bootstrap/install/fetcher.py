"""
Release artifact fetching.

Builds the artifact and checksum URLs for a platform and downloads both into
a platform-keyed temporary location, so repeated runs overwrite the previous
download instead of accumulating files.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Tuple

import requests

from ..config.settings import InstallSettings
from ..core.download import DownloadProgress, download_file
from ..core.platform import PlatformDescriptor

logger = logging.getLogger(__name__)

CHECKSUM_SUFFIX = ".md5"


def build_artifact_urls(base_url: str, platform: PlatformDescriptor) -> Tuple[str, str]:
    """
    Build artifact and checksum URLs.

    Args:
        base_url: URL prefix the platform string is appended to
        platform: Resolved platform

    Returns:
        (artifact_url, checksum_url)

    Example:
        >>> build_artifact_urls("https://host/privado-", PlatformDescriptor(
        ...     OperatingSystem.WINDOWS, Architecture.AMD64))
        ('https://host/privado-windows-amd64.zip',
         'https://host/privado-windows-amd64.zip.md5')
    """
    artifact_url = f"{base_url}{platform.platform_string}.{platform.archive_extension}"
    return artifact_url, artifact_url + CHECKSUM_SUFFIX


@dataclass(frozen=True)
class ArtifactLocation:
    """Local paths of a downloaded artifact and its checksum sidecar."""

    platform: PlatformDescriptor
    archive_path: Path
    checksum_path: Path


class ArtifactFetcher:
    """Downloads the release artifact and its checksum for a platform."""

    def __init__(
        self,
        settings: InstallSettings,
        session: Optional[requests.Session] = None,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        self.settings = settings
        self.session = session
        self.progress_callback = progress_callback

    def location_for(self, platform: PlatformDescriptor) -> ArtifactLocation:
        """Temporary download location for platform (stable across runs)."""
        archive_path = self.settings.download_dir / platform.artifact_name
        return ArtifactLocation(
            platform=platform,
            archive_path=archive_path,
            checksum_path=archive_path.with_name(archive_path.name + CHECKSUM_SUFFIX),
        )

    def fetch(self, platform: PlatformDescriptor) -> ArtifactLocation:
        """
        Download artifact and checksum for platform.

        Returns:
            ArtifactLocation of the downloaded files

        Raises:
            DownloadError: If either download fails
        """
        artifact_url, checksum_url = build_artifact_urls(
            self.settings.base_url, platform
        )
        location = self.location_for(platform)

        download_file(
            artifact_url,
            location.archive_path,
            progress_callback=self.progress_callback,
            timeout=self.settings.timeout,
            max_retries=self.settings.max_retries,
            session=self.session,
        )
        download_file(
            checksum_url,
            location.checksum_path,
            timeout=self.settings.timeout,
            max_retries=self.settings.max_retries,
            session=self.session,
        )

        logger.debug(f"Fetched {location.archive_path} and {location.checksum_path}")
        return location
