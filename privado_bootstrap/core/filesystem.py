"""
File system utilities for privado-bootstrap.

This module provides the file operations the installer and the cache
resolvers are built on:
- Strict existence checks that surface permission problems
- Archive extraction (tar.gz, zip) with directory traversal protection
- Symlink replacement and executable bits
"""

import errno
import logging
import os
import stat
import sys
import tarfile
import zipfile
from pathlib import Path
from typing import Union

from .exceptions import FilesystemError, InsecureArchiveError

logger = logging.getLogger(__name__)

# errno values that simply mean "nothing there"
_MISSING_ERRNOS = (errno.ENOENT, errno.ENOTDIR)


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to (under) parent directory.

    Example:
        >>> is_relative_to(Path("/home/user/.privado/bin/privado"), Path("/home/user"))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def path_exists(path: Union[str, Path]) -> bool:
    """
    Check whether a path exists, without hiding permission errors.

    ``Path.exists()`` reports False for some failures; callers that must
    tell "absent" apart from "cannot look" use this instead.

    Args:
        path: Path to check

    Returns:
        True if the path exists, False if it is absent

    Raises:
        OSError: If the path cannot be examined (e.g. permission denied)
    """
    try:
        os.stat(path)
        return True
    except OSError as e:
        if e.errno in _MISSING_ERRNOS:
            return False
        raise


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists (idempotent, recursive).

    Args:
        path: Directory path

    Returns:
        Path object

    Raises:
        FilesystemError: If the directory cannot be created
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Could not create directory {path}: {e}") from e
    return path


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def _remove_existing(path: str, destination: Path) -> None:
    """
    Unlink a file or symlink an archive member is about to replace.

    Extraction then creates a new file instead of writing into the old one,
    so read-only files from a previous install are replaced.
    """
    target = destination / path
    if target.is_symlink() or target.is_file():
        target.unlink()


def extract_tar_gz(archive_path: Path, destination: Path) -> None:
    """
    Extract a gzip-compressed tar archive into destination.

    Raises:
        InsecureArchiveError: If a member escapes destination
        FilesystemError: If extraction fails
    """
    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            members = tar.getmembers()
            for member in members:
                _validate_archive_path(member.name, destination)
            for member in members:
                if not member.isdir():
                    _remove_existing(member.name, destination)

            # Python 3.12+ has extraction filters; older versions rely on the
            # path validation above
            if sys.version_info >= (3, 12):
                tar.extractall(destination, filter="data")
            else:
                tar.extractall(destination)
    except InsecureArchiveError:
        raise
    except (tarfile.TarError, OSError) as e:
        raise FilesystemError(f"Failed to extract {archive_path}: {e}") from e


def extract_zip(archive_path: Path, destination: Path) -> None:
    """
    Extract a ZIP archive into destination, overwriting existing files.

    Raises:
        InsecureArchiveError: If a member escapes destination
        FilesystemError: If extraction fails
    """
    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            members = zf.namelist()
            for member in members:
                _validate_archive_path(member, destination)
            for member in members:
                if not member.endswith("/"):
                    _remove_existing(member, destination)
            zf.extractall(destination)
    except InsecureArchiveError:
        raise
    except (zipfile.BadZipFile, OSError) as e:
        raise FilesystemError(f"Failed to extract {archive_path}: {e}") from e


# ============================================================================
# Links and Permissions
# ============================================================================


def make_executable(path: Path) -> None:
    """
    Add execute bits (user, group, other) to a file.

    Raises:
        FilesystemError: If the mode cannot be changed
    """
    try:
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as e:
        raise FilesystemError(f"Could not make {path} executable: {e}") from e


def replace_symlink(target: Path, link_path: Path) -> None:
    """
    Point link_path at target, replacing any link or file already there.

    Args:
        target: Path the link should resolve to
        link_path: Location of the link

    Raises:
        FilesystemError: If link_path is a directory or the link cannot be made
    """
    try:
        if link_path.is_symlink() or link_path.is_file():
            link_path.unlink()
        elif link_path.is_dir():
            raise FilesystemError(
                f"Link path exists as a directory: {link_path}. "
                "Please remove it manually if you want to create a link."
            )

        link_path.parent.mkdir(parents=True, exist_ok=True)
        os.symlink(target, link_path)
    except OSError as e:
        raise FilesystemError(
            f"Failed to create symlink {link_path} -> {target}: {e}"
        ) from e

    logger.info(f"Created symlink: {link_path} -> {target}")
