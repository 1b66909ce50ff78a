"""
Doctor command for diagnosing the install environment.

Reports whether the host platform has a release build, whether Docker is
reachable and where the CLI cache lives.
"""

import logging
from typing import List

from privado_bootstrap.cli.utils import print_warning, safe_print
from privado_bootstrap.config.cache import CacheResolver
from privado_bootstrap.config.configuration import bootstrap_configuration
from privado_bootstrap.core.exceptions import (
    CacheResolutionError,
    UnsupportedPlatformError,
)
from privado_bootstrap.core.platform import detect_platform
from privado_bootstrap.core.preflight import CheckResult, check_container_runtime

logger = logging.getLogger(__name__)

# Failures of these checks are reported as warnings
OPTIONAL_CHECKS = ("Cache",)


def check_platform() -> CheckResult:
    """Check that a release is published for the host platform."""
    try:
        platform = detect_platform()
    except UnsupportedPlatformError as e:
        return CheckResult(
            name="Platform",
            passed=False,
            message=f"{e} ({e.token})",
            fix_command="Supported platforms: linux, darwin and msys on x86_64 or arm64",
        )
    return CheckResult(
        name="Platform", passed=True, message=f"{platform} ({platform.artifact_name})"
    )


def check_cache(resolver: CacheResolver) -> CheckResult:
    """Check for an existing cache directory without creating one."""
    try:
        location = resolver.resolve()
    except CacheResolutionError as e:
        return CheckResult(name="Cache", passed=False, message=str(e))

    if location is None:
        return CheckResult(
            name="Cache",
            passed=False,
            message="No cache directory yet",
            fix_command="privado-bootstrap env",
        )
    return CheckResult(name="Cache", passed=True, message=str(location))


def run_all_checks() -> List[CheckResult]:
    """Run every diagnostic check."""
    configuration = bootstrap_configuration(resolve_cache=False)
    return [
        check_platform(),
        check_container_runtime(),
        check_cache(configuration.cache_resolver()),
    ]


def run(args) -> int:
    """
    Run doctor command.

    Args:
        args: Parsed arguments from argparse

    Returns:
        Exit code (0 when no required check failed)
    """
    quiet = args.quiet

    if not quiet:
        safe_print("Running Privado bootstrap diagnostics...\n")
    logger.debug("Starting environment diagnostics")

    passed = 0
    failed = 0
    warnings = 0

    for result in run_all_checks():
        if result.passed:
            passed += 1
            if not quiet:
                safe_print(f"✓ {result.name}: {result.message}")
            continue

        if result.name in OPTIONAL_CHECKS:
            warnings += 1
            if not quiet:
                print_warning(f"{result.name}: {result.message}")
        else:
            failed += 1
            safe_print(f"✗ {result.name}: {result.message}")
            logger.debug(f"Check failed: {result.name}")

        if result.fix_command and not quiet:
            print(f"   Fix: {result.fix_command}")

    if not quiet:
        print(f"\nSummary: {passed} passed, {failed} failed, {warnings} warnings")

    return 0 if failed == 0 else 1
