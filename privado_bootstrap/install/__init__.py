"""
Install path: fetch, verify and install a Privado CLI release.
"""

from .fetcher import ArtifactFetcher, ArtifactLocation, build_artifact_urls
from .installer import InstallResult, Installer, install_release, is_privileged
from .profile import ProfileUpdate, ShellProfileUpdater

__all__ = [
    "ArtifactFetcher",
    "ArtifactLocation",
    "build_artifact_urls",
    "InstallResult",
    "Installer",
    "install_release",
    "is_privileged",
    "ProfileUpdate",
    "ShellProfileUpdater",
]
