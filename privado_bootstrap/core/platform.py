"""
Platform detection for privado-bootstrap.

Resolves the (OS, architecture) pair used to pick a release artifact. The
resolved values are embedded verbatim in the download URL, so matching is
exact: only the literal tokens a bash installer sees (``$OSTYPE`` and
``uname -m``) are accepted, with no case folding and no aliases.

Usage:
    from privado_bootstrap.core.platform import detect_platform

    descriptor = detect_platform()
    print(descriptor.artifact_name)  # e.g. 'privado-linux-amd64.tar.gz'
"""

import logging
import os
import platform
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from .exceptions import UnsupportedPlatformError

logger = logging.getLogger(__name__)


class OperatingSystem(str, Enum):
    """Operating systems a release artifact is published for."""

    LINUX = "linux"
    DARWIN = "darwin"
    WINDOWS = "windows"


class Architecture(str, Enum):
    """CPU architectures a release artifact is published for."""

    AMD64 = "amd64"
    ARM64 = "arm64"


@dataclass(frozen=True)
class PlatformDescriptor:
    """
    Resolved platform of the host running the installer.

    Attributes:
        os: Operating system of the release artifact
        arch: CPU architecture of the release artifact
    """

    os: OperatingSystem
    arch: Architecture

    @property
    def platform_string(self) -> str:
        """Platform part of artifact names, e.g. 'darwin-arm64'."""
        return f"{self.os.value}-{self.arch.value}"

    @property
    def archive_extension(self) -> str:
        """Archive extension of the release artifact (no leading dot)."""
        return "zip" if self.os is OperatingSystem.WINDOWS else "tar.gz"

    @property
    def artifact_name(self) -> str:
        """File name of the release artifact for this platform."""
        return f"privado-{self.platform_string}.{self.archive_extension}"

    def __str__(self) -> str:
        return self.platform_string


# ============================================================================
# Token Mapping
# ============================================================================


def detect_os(os_token: str) -> OperatingSystem:
    """
    Map an ``$OSTYPE``-style token to an operating system.

    Args:
        os_token: OS identifier, e.g. 'linux-gnu', 'darwin22', 'msys'

    Returns:
        The matching OperatingSystem

    Raises:
        UnsupportedPlatformError: If the token is not recognised

    Example:
        >>> detect_os("darwin23.0")
        <OperatingSystem.DARWIN: 'darwin'>
    """
    if os_token.startswith("linux-gnu"):
        return OperatingSystem.LINUX
    if os_token.startswith("darwin"):
        return OperatingSystem.DARWIN
    if os_token == "msys":
        return OperatingSystem.WINDOWS

    logger.debug(f"Rejected OS token: {os_token!r}")
    raise UnsupportedPlatformError("Unsupported OS", token=os_token)


def detect_arch(machine_token: str) -> Architecture:
    """
    Map a ``uname -m``-style token to an architecture.

    Args:
        machine_token: Machine identifier, e.g. 'x86_64', 'arm64'

    Returns:
        The matching Architecture

    Raises:
        UnsupportedPlatformError: If the token is not recognised
    """
    if machine_token == "x86_64":
        return Architecture.AMD64
    if machine_token == "arm64":
        return Architecture.ARM64

    logger.debug(f"Rejected architecture token: {machine_token!r}")
    raise UnsupportedPlatformError("Unsupported Architecture", token=machine_token)


# ============================================================================
# Host Signals
# ============================================================================


def host_os_token(environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Get the ``$OSTYPE`` token of the current host.

    Bash does not export OSTYPE by default, so when it is absent the token
    bash would report is derived from ``sys.platform``.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        OS token string
    """
    env = os.environ if environ is None else environ
    token = env.get("OSTYPE")
    if token:
        return token

    if sys.platform.startswith("linux"):
        return "linux-gnu"
    if sys.platform == "darwin":
        return "darwin"
    if sys.platform in ("win32", "msys", "cygwin"):
        return "msys"
    return sys.platform


def host_machine_token() -> str:
    """
    Get the ``uname -m`` token of the current host.

    Windows reports 'AMD64' where an MSYS shell's ``uname -m`` prints
    'x86_64'; every other value is passed through untouched.
    """
    machine = platform.machine()
    if sys.platform == "win32" and machine == "AMD64":
        return "x86_64"
    return machine


def detect_platform(
    os_token: Optional[str] = None, machine_token: Optional[str] = None
) -> PlatformDescriptor:
    """
    Resolve the platform descriptor of the host.

    Args:
        os_token: OS token override (defaults to host_os_token())
        machine_token: Machine token override (defaults to host_machine_token())

    Returns:
        PlatformDescriptor for the host

    Raises:
        UnsupportedPlatformError: If either token is unsupported
    """
    if os_token is None:
        os_token = host_os_token()
    if machine_token is None:
        machine_token = host_machine_token()

    descriptor = PlatformDescriptor(
        os=detect_os(os_token), arch=detect_arch(machine_token)
    )
    logger.debug(
        f"Detected platform {descriptor} from tokens "
        f"({os_token!r}, {machine_token!r})"
    )
    return descriptor
