"""
Checksum verification for downloaded release artifacts.

Release artifacts are published with an MD5 sidecar file holding the
expected digest. This module provides:
- In-process MD5 computation (hashlib)
- The per-OS checksum command (md5sum, md5, certutil) and parsers for its output
- Sidecar parsing and exact comparison of expected vs. actual digests
"""

import hashlib
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .exceptions import IntegrityError
from .platform import OperatingSystem

logger = logging.getLogger(__name__)


def compute_md5(file_path: Path) -> str:
    """
    Compute MD5 digest of a file.

    Args:
        file_path: Path to file

    Returns:
        Lowercase hex digest

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    # MD5 is what the release pipeline publishes; it guards against
    # corrupted transfers, not against a hostile mirror.
    hasher = hashlib.md5(usedforsecurity=False)
    with open(file_path, "rb") as f:
        while chunk := f.read(8192):
            hasher.update(chunk)

    return hasher.hexdigest()


# ============================================================================
# OS Checksum Tools
# ============================================================================


def parse_checksum_output(os_name: OperatingSystem, output: str) -> str:
    """
    Extract the digest from the output of the OS checksum command.

    Formats:
    - linux  (md5sum): ``<hash>  <file>`` -> first field
    - darwin (md5):    ``MD5 (<file>) = <hash>`` -> fourth field
    - windows (certutil): hash on the second line, between a header and a
      ``CertUtil: ... completed successfully`` trailer

    Args:
        os_name: Operating system the output came from
        output: Raw command output

    Returns:
        Digest string (stripped)

    Raises:
        IntegrityError: If the output doesn't have the expected shape
    """
    if os_name is OperatingSystem.WINDOWS:
        lines = output.splitlines()
        if len(lines) < 2:
            raise IntegrityError(f"Unexpected certutil output: {output!r}")
        return lines[1].strip()

    fields = output.split()
    index = 0 if os_name is OperatingSystem.LINUX else 3
    if len(fields) <= index:
        raise IntegrityError(f"Unexpected checksum tool output: {output!r}")
    return fields[index].strip()


@dataclass(frozen=True)
class ChecksumTool:
    """External command that prints an MD5 digest for one OS."""

    os_name: OperatingSystem

    def command(self, file_path: Path) -> List[str]:
        """Build the command line for hashing file_path."""
        if self.os_name is OperatingSystem.WINDOWS:
            return ["certutil", "-hashfile", str(file_path), "MD5"]
        if self.os_name is OperatingSystem.DARWIN:
            return ["md5", str(file_path)]
        return ["md5sum", str(file_path)]

    def compute(self, file_path: Path, timeout: int = 120) -> str:
        """
        Run the tool against file_path and return the digest.

        Raises:
            IntegrityError: If the tool is missing, fails, or prints garbage
        """
        cmd = self.command(file_path)
        logger.debug(f"Running checksum tool: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, timeout=timeout
            )
        except FileNotFoundError as e:
            raise IntegrityError(f"Checksum tool not found: {cmd[0]}") from e
        except subprocess.TimeoutExpired as e:
            raise IntegrityError(f"Checksum tool timed out: {cmd[0]}") from e

        if result.returncode != 0:
            raise IntegrityError(
                f"Checksum tool {cmd[0]} failed: {result.stderr.strip()}"
            )
        return parse_checksum_output(self.os_name, result.stdout)


# ============================================================================
# Sidecar Verification
# ============================================================================


def read_sidecar(sidecar_path: Path) -> str:
    """
    Read the expected digest from a checksum sidecar file.

    Raises:
        IntegrityError: If the sidecar cannot be read
    """
    try:
        return sidecar_path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        raise IntegrityError(f"Cannot read checksum file {sidecar_path}: {e}") from e


class IntegrityVerifier:
    """
    Compares a downloaded artifact against its checksum sidecar.

    Example:
        >>> verifier = IntegrityVerifier(OperatingSystem.LINUX)
        >>> verifier.verify(Path("/tmp/privado-linux-amd64.tar.gz"),
        ...                 Path("/tmp/privado-linux-amd64.tar.gz.md5"))
    """

    def __init__(
        self, os_name: OperatingSystem, use_system_tool: bool = False
    ):
        """
        Initialize verifier.

        Args:
            os_name: Operating system the artifact was fetched for
            use_system_tool: Hash with the OS checksum command instead of hashlib
        """
        self.os_name = os_name
        self.tool: Optional[ChecksumTool] = (
            ChecksumTool(os_name) if use_system_tool else None
        )

    def actual_checksum(self, artifact_path: Path) -> str:
        """Compute the digest of the artifact."""
        if self.tool is not None:
            return self.tool.compute(artifact_path).strip()
        try:
            return compute_md5(artifact_path)
        except OSError as e:
            raise IntegrityError(f"Cannot hash {artifact_path}: {e}") from e

    def verify(self, artifact_path: Path, sidecar_path: Path) -> str:
        """
        Verify the artifact against its sidecar.

        Comparison is exact after trimming surrounding whitespace.

        Args:
            artifact_path: Downloaded artifact
            sidecar_path: Downloaded checksum sidecar

        Returns:
            The verified digest

        Raises:
            IntegrityError: If the digests differ or cannot be obtained
        """
        expected = read_sidecar(sidecar_path)
        actual = self.actual_checksum(artifact_path)

        if expected != actual:
            logger.debug(
                f"Checksum mismatch for {artifact_path.name}: "
                f"expected {expected!r}, got {actual!r}"
            )
            raise IntegrityError(
                "Error in downloading the file. Please retry",
                expected=expected,
                actual=actual,
            )

        logger.info(f"Checksum verified for {artifact_path.name}")
        return actual
