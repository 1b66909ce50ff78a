"""
Core functionality for privado-bootstrap.

This package contains the foundational modules the install and runtime
paths depend on.
"""

from .exceptions import (
    PrivadoBootstrapError,
    UnsupportedPlatformError,
    IndeterminatePlatformError,
    DownloadError,
    IntegrityError,
    FilesystemError,
    InsecureArchiveError,
    CacheResolutionError,
    SettingsError,
    PreflightError,
)

from .platform import (
    OperatingSystem,
    Architecture,
    PlatformDescriptor,
    detect_os,
    detect_arch,
    detect_platform,
)

from .verification import (
    IntegrityVerifier,
    ChecksumTool,
    compute_md5,
)

from .preflight import (
    CheckResult,
    check_container_runtime,
    run_preflight_checks,
)

__all__ = [
    "PrivadoBootstrapError",
    "UnsupportedPlatformError",
    "IndeterminatePlatformError",
    "DownloadError",
    "IntegrityError",
    "FilesystemError",
    "InsecureArchiveError",
    "CacheResolutionError",
    "SettingsError",
    "PreflightError",
    "OperatingSystem",
    "Architecture",
    "PlatformDescriptor",
    "detect_os",
    "detect_arch",
    "detect_platform",
    "IntegrityVerifier",
    "ChecksumTool",
    "compute_md5",
    "CheckResult",
    "check_container_runtime",
    "run_preflight_checks",
]
