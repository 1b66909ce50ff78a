"""
Install command implementation.

Detects the platform, runs preflight checks, then fetches, verifies and
installs the latest Privado CLI release.
"""

import logging

from privado_bootstrap.cli.utils import format_success_message, safe_print
from privado_bootstrap.config.settings import load_install_settings
from privado_bootstrap.core.download import DownloadProgress
from privado_bootstrap.core.platform import detect_platform
from privado_bootstrap.core.preflight import run_preflight_checks
from privado_bootstrap.install.installer import (
    INSTALL_COMPLETE_MESSAGE,
    install_release,
)

logger = logging.getLogger(__name__)


def _log_progress(progress: DownloadProgress) -> None:
    logger.debug(f"  {progress}")


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)

    Raises:
        PrivadoBootstrapError: If any install step fails
    """
    settings = load_install_settings(args.config).merged(
        {
            "base_url": args.base_url,
            "install_root": args.install_root,
            "use_system_checksum_tool": args.system_checksum,
        }
    )

    platform = detect_platform(args.os_type, args.machine)
    logger.info(f"Installing Privado CLI for {platform}")

    if args.skip_preflight:
        logger.debug("Skipping preflight checks")
    else:
        run_preflight_checks()

    result = install_release(settings, platform, progress_callback=_log_progress)

    details = {
        "Platform": result.platform,
        "Executable": result.executable_path,
    }
    if result.system_link is not None:
        details["Linked as"] = result.system_link
    if result.profile_update is not None:
        state = "updated" if result.profile_update.appended else "already set up"
        details["Shell profile"] = f"{result.profile_update.profile_path} ({state})"

    if not args.quiet:
        safe_print(format_success_message("✓ Privado CLI installed", details))
    print(INSTALL_COMPLETE_MESSAGE)
    return 0
