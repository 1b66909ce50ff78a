"""
Centralized exception hierarchy for privado-bootstrap.

Every error carries the process exit code the CLI reports when the error
reaches it, so install failures map onto the installer's documented codes.
"""

# Exit codes
EXIT_INSTALL_FAILURE = 10
EXIT_INDETERMINATE_PLATFORM = 1
EXIT_PREFLIGHT_FAILURE = 3
EXIT_GENERIC_FAILURE = 1


# ============================================================================
# Base Exceptions
# ============================================================================


class PrivadoBootstrapError(Exception):
    """Base exception for all privado-bootstrap errors."""

    exit_code = EXIT_GENERIC_FAILURE


# ============================================================================
# Install Path Exceptions
# ============================================================================


class UnsupportedPlatformError(PrivadoBootstrapError):
    """Raised when the OS or architecture token is not a supported one."""

    exit_code = EXIT_INSTALL_FAILURE

    def __init__(self, message: str, token: str = ""):
        self.token = token
        super().__init__(message)


class IndeterminatePlatformError(PrivadoBootstrapError):
    """Raised when the installer is handed no resolved platform."""

    exit_code = EXIT_INDETERMINATE_PLATFORM


class DownloadError(PrivadoBootstrapError):
    """Raised when a release artifact or its checksum cannot be fetched."""

    exit_code = EXIT_INSTALL_FAILURE


class IntegrityError(PrivadoBootstrapError):
    """Raised when the downloaded artifact does not match its sidecar checksum."""

    exit_code = EXIT_INSTALL_FAILURE

    def __init__(self, message: str, expected: str = "", actual: str = ""):
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class FilesystemError(PrivadoBootstrapError):
    """Raised when a directory, extraction, link or profile write fails."""

    exit_code = EXIT_INSTALL_FAILURE


class InsecureArchiveError(FilesystemError):
    """Archive contains a member that would land outside the target directory."""

    pass


# ============================================================================
# Runtime Path Exceptions
# ============================================================================


class CacheResolutionError(PrivadoBootstrapError):
    """Raised when a cache directory cannot be checked or created."""

    pass


class SettingsError(PrivadoBootstrapError):
    """Raised when the install settings file is missing or malformed."""

    pass


# ============================================================================
# Preflight Exceptions
# ============================================================================


class PreflightError(PrivadoBootstrapError):
    """Raised when a required external runtime is not reachable."""

    exit_code = EXIT_PREFLIGHT_FAILURE

    def __init__(self, message: str, remediation: str = ""):
        self.remediation = remediation
        super().__init__(message)
