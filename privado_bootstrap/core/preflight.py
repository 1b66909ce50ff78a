"""
Preflight checks run before installing.

The Privado CLI drives its analysis engine through Docker, so the only
preflight check is a liveness probe against the Docker daemon.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .exceptions import PreflightError

logger = logging.getLogger(__name__)

DOCKER_PROBE_COMMAND = ("docker", "ps")

PREFLIGHT_FAILED_MESSAGE = "> Preflight checks failed!"
DOCKER_REMEDIATION = (
    "> Either Docker is not installed, not running, or you do not have "
    "appropriate permissions to use the same. Please retry this script "
    "with sudo privileges."
)


@dataclass
class CheckResult:
    """Result of a preflight check."""

    name: str
    passed: bool
    message: str
    fix_command: Optional[str] = None


def check_container_runtime(
    command: Sequence[str] = DOCKER_PROBE_COMMAND, timeout: int = 30
) -> CheckResult:
    """
    Probe the container runtime.

    Args:
        command: Probe command line (output is discarded)
        timeout: Seconds to wait for the probe

    Returns:
        CheckResult indicating whether the runtime answered
    """
    try:
        result = subprocess.run(
            list(command), capture_output=True, text=True, timeout=timeout
        )
    except FileNotFoundError:
        return CheckResult(
            name="Docker",
            passed=False,
            message=f"{command[0]} not found in PATH",
            fix_command=DOCKER_REMEDIATION,
        )
    except subprocess.TimeoutExpired:
        return CheckResult(
            name="Docker",
            passed=False,
            message=f"'{' '.join(command)}' timed out after {timeout}s",
            fix_command=DOCKER_REMEDIATION,
        )

    if result.returncode != 0:
        logger.debug(f"Docker probe stderr: {result.stderr.strip()}")
        return CheckResult(
            name="Docker",
            passed=False,
            message=f"'{' '.join(command)}' exited with code {result.returncode}",
            fix_command=DOCKER_REMEDIATION,
        )

    return CheckResult(name="Docker", passed=True, message="Docker daemon reachable")


def run_preflight_checks(
    command: Sequence[str] = DOCKER_PROBE_COMMAND,
) -> List[CheckResult]:
    """
    Run all preflight checks, failing on the first one that does not pass.

    Returns:
        Results of the checks that ran

    Raises:
        PreflightError: If a check fails
    """
    results = []
    check = check_container_runtime(command)
    results.append(check)

    if not check.passed:
        logger.debug(f"Preflight check {check.name} failed: {check.message}")
        raise PreflightError(PREFLIGHT_FAILED_MESSAGE, remediation=DOCKER_REMEDIATION)

    logger.debug("Preflight checks passed")
    return results
