"""
Release installation.

This module turns a verified release artifact into an installed CLI:
1. Create the install bin directory
2. Extract the archive (zip on Windows, tar.gz elsewhere)
3. Mark the executable as executable
4. Put it on PATH: a system-wide symlink when running as root, otherwise a
   shell profile export line

Nothing is rolled back if a step fails; the error propagates.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests

from ..config.settings import InstallSettings
from ..core.download import DownloadProgress
from ..core.exceptions import FilesystemError, IndeterminatePlatformError
from ..core.filesystem import (
    ensure_directory,
    extract_tar_gz,
    extract_zip,
    make_executable,
    replace_symlink,
)
from ..core.platform import OperatingSystem, PlatformDescriptor
from ..core.verification import IntegrityVerifier
from .fetcher import ArtifactFetcher, ArtifactLocation
from .profile import ProfileUpdate, ShellProfileUpdater

logger = logging.getLogger(__name__)

INDETERMINATE_PLATFORM_MESSAGE = (
    "Unsupported OS or Arch type. "
    "Please visit https://privado.ai/cli for more information."
)
INSTALL_COMPLETE_MESSAGE = (
    "Installation is complete. Please open a new session and use the privado cli tool"
)


def is_privileged() -> bool:
    """Check whether the process runs as the superuser (always False on Windows)."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


@dataclass
class InstallResult:
    """Result of an install."""

    platform: PlatformDescriptor
    """Platform the artifact was installed for"""

    executable_path: Path
    """Installed executable inside the install bin directory"""

    system_link: Optional[Path] = None
    """System-wide symlink (privileged installs only)"""

    profile_update: Optional[ProfileUpdate] = None
    """Shell profile change (unprivileged installs only)"""


class Installer:
    """
    Installs a verified artifact and establishes its PATH entry point.

    Example:
        >>> installer = Installer(InstallSettings())
        >>> result = installer.install(platform, location)
        >>> print(result.executable_path)
    """

    def __init__(
        self,
        settings: InstallSettings,
        home: Optional[Path] = None,
        privileged: Optional[bool] = None,
    ):
        """
        Initialize installer.

        Args:
            settings: Install settings
            home: Home directory holding shell profiles (default: Path.home())
            privileged: Override superuser detection
        """
        self.settings = settings
        self.home = home if home is not None else Path.home()
        self.privileged = is_privileged() if privileged is None else privileged

    def executable_path(self, platform: PlatformDescriptor) -> Path:
        """Location of the installed executable for platform."""
        name = self.settings.tool_name
        if platform.os is OperatingSystem.WINDOWS:
            name += ".exe"
        return self.settings.bin_dir / name

    def install(
        self, platform: Optional[PlatformDescriptor], location: ArtifactLocation
    ) -> InstallResult:
        """
        Install a verified artifact.

        Args:
            platform: Resolved platform; None means detection never completed
            location: Downloaded (and verified) artifact

        Returns:
            InstallResult describing the installation

        Raises:
            IndeterminatePlatformError: If platform is None
            FilesystemError: If any filesystem step fails
        """
        if platform is None:
            raise IndeterminatePlatformError(INDETERMINATE_PLATFORM_MESSAGE)

        bin_dir = ensure_directory(self.settings.bin_dir)
        logger.info(f"Extracting {location.archive_path.name} to {bin_dir}")

        if platform.os is OperatingSystem.WINDOWS:
            extract_zip(location.archive_path, bin_dir)
        else:
            extract_tar_gz(location.archive_path, bin_dir)

        executable = self.executable_path(platform)
        if not executable.is_file():
            raise FilesystemError(
                f"Archive {location.archive_path.name} did not provide {executable.name}"
            )
        make_executable(executable)

        result = InstallResult(platform=platform, executable_path=executable)

        if self.privileged:
            link_path = self.settings.system_bin_dir / self.settings.tool_name
            replace_symlink(executable, link_path)
            result.system_link = link_path
        else:
            updater = ShellProfileUpdater(self.home, self.settings.install_root)
            result.profile_update = updater.update()

        logger.debug(f"Installed {executable}")
        return result


def install_release(
    settings: InstallSettings,
    platform: PlatformDescriptor,
    session: Optional[requests.Session] = None,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    installer: Optional[Installer] = None,
) -> InstallResult:
    """
    Fetch, verify and install the release for platform.

    Each step is a precondition for the next; the first failure propagates.

    Raises:
        DownloadError: If the artifact or checksum cannot be fetched
        IntegrityError: If the checksum does not match
        FilesystemError: If installation fails
    """
    fetcher = ArtifactFetcher(
        settings, session=session, progress_callback=progress_callback
    )
    location = fetcher.fetch(platform)

    verifier = IntegrityVerifier(
        platform.os, use_system_tool=settings.use_system_checksum_tool
    )
    verifier.verify(location.archive_path, location.checksum_path)

    installer = installer or Installer(settings)
    return installer.install(platform, location)
