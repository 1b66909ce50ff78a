"""
Unit tests for filesystem utilities.

Tests the operations the installer and cache resolvers use:
- Strict existence checks
- Archive extraction with traversal protection
- Symlink replacement and executable bits
"""

import errno
import io
import os
import stat
import zipfile
import pytest
from pathlib import Path
from unittest.mock import patch

from privado_bootstrap.core.exceptions import FilesystemError, InsecureArchiveError
from privado_bootstrap.core.filesystem import (
    ensure_directory,
    extract_tar_gz,
    extract_zip,
    is_relative_to,
    make_executable,
    path_exists,
    replace_symlink,
)
from tests.fixtures.archives import build_tar_gz, build_zip


# ============================================================================
# Path Utilities
# ============================================================================


class TestPathUtilities:
    """Test path helpers."""

    def test_is_relative_to(self, tmp_path):
        """Test parent containment."""
        assert is_relative_to(tmp_path / "a" / "b", tmp_path) is True
        assert is_relative_to(tmp_path.parent, tmp_path) is False

    def test_path_exists(self, tmp_path):
        """Test existing and missing paths."""
        assert path_exists(tmp_path) is True
        assert path_exists(tmp_path / "missing") is False

    def test_path_exists_through_file(self, tmp_path):
        """Test a path below a regular file counts as missing."""
        file_path = tmp_path / "file"
        file_path.write_text("x")

        assert path_exists(file_path / "child") is False

    def test_path_exists_surfaces_permission_errors(self, tmp_path):
        """Test errors other than 'missing' propagate."""
        denied = OSError(errno.EACCES, "Permission denied")
        with patch("privado_bootstrap.core.filesystem.os.stat", side_effect=denied):
            with pytest.raises(OSError):
                path_exists(tmp_path / "x")

    def test_ensure_directory_recursive(self, tmp_path):
        """Test nested directories are created and re-creation is a no-op."""
        target = tmp_path / ".privado" / "bin"

        assert ensure_directory(target) == target
        assert ensure_directory(target) == target
        assert target.is_dir()

    def test_ensure_directory_failure(self, tmp_path):
        """Test a blocking file raises FilesystemError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        with pytest.raises(FilesystemError, match="Could not create directory"):
            ensure_directory(blocker / "bin")


# ============================================================================
# Archive Extraction
# ============================================================================


class TestExtraction:
    """Test archive extraction."""

    def test_extract_tar_gz(self, tmp_path):
        """Test tarball members land in the destination."""
        archive = tmp_path / "a.tar.gz"
        archive.write_bytes(build_tar_gz({"privado": b"bin", "LICENSE": b"text"}))
        destination = tmp_path / "out"
        destination.mkdir()

        extract_tar_gz(archive, destination)

        assert (destination / "privado").read_bytes() == b"bin"
        assert (destination / "LICENSE").read_bytes() == b"text"

    def test_extract_zip_overwrites(self, tmp_path):
        """Test zip extraction replaces existing files."""
        archive = tmp_path / "a.zip"
        archive.write_bytes(build_zip({"privado.exe": b"new"}))
        destination = tmp_path / "out"
        destination.mkdir()
        (destination / "privado.exe").write_bytes(b"old")

        extract_zip(archive, destination)

        assert (destination / "privado.exe").read_bytes() == b"new"

    def test_tar_traversal_blocked(self, tmp_path):
        """Test members escaping the destination are rejected."""
        archive = tmp_path / "evil.tar.gz"
        archive.write_bytes(build_tar_gz({"../escape": b"x"}))
        destination = tmp_path / "out"
        destination.mkdir()

        with pytest.raises(InsecureArchiveError):
            extract_tar_gz(archive, destination)

        assert not (tmp_path / "escape").exists()

    def test_zip_traversal_blocked(self, tmp_path):
        """Test zip members escaping the destination are rejected."""
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            zf.writestr("../../escape", b"x")
        archive = tmp_path / "evil.zip"
        archive.write_bytes(buffer.getvalue())
        destination = tmp_path / "out"
        destination.mkdir()

        with pytest.raises(InsecureArchiveError):
            extract_zip(archive, destination)

    @pytest.mark.posix_only
    def test_extract_tar_replaces_read_only_file(self, tmp_path):
        """Test an existing read-only file is replaced, not written into."""
        destination = tmp_path / "out"
        destination.mkdir()
        existing = destination / "privado"
        existing.write_bytes(b"old")
        existing.chmod(0o555)
        archive = tmp_path / "a.tar.gz"
        archive.write_bytes(build_tar_gz({"privado": b"new"}, mode=0o555))

        extract_tar_gz(archive, destination)

        assert existing.read_bytes() == b"new"

    def test_extract_zip_replaces_symlink(self, tmp_path):
        """Test a symlink at a member path is replaced by the member."""
        outside = tmp_path / "outside"
        outside.write_bytes(b"untouched")
        destination = tmp_path / "out"
        destination.mkdir()
        try:
            os.symlink(outside, destination / "privado.exe")
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not available")
        archive = tmp_path / "a.zip"
        archive.write_bytes(build_zip({"privado.exe": b"new"}))

        extract_zip(archive, destination)

        assert not (destination / "privado.exe").is_symlink()
        assert (destination / "privado.exe").read_bytes() == b"new"
        assert outside.read_bytes() == b"untouched"

    def test_rejected_archive_keeps_existing_files(self, tmp_path):
        """Test nothing is removed when a later member is rejected."""
        destination = tmp_path / "out"
        destination.mkdir()
        (destination / "privado").write_bytes(b"installed")
        archive = tmp_path / "evil.tar.gz"
        archive.write_bytes(build_tar_gz({"privado": b"new", "../escape": b"x"}))

        with pytest.raises(InsecureArchiveError):
            extract_tar_gz(archive, destination)

        assert (destination / "privado").read_bytes() == b"installed"

    def test_corrupt_tar(self, tmp_path):
        """Test a corrupt archive raises FilesystemError."""
        archive = tmp_path / "bad.tar.gz"
        archive.write_bytes(b"not a tarball")

        with pytest.raises(FilesystemError, match="Failed to extract"):
            extract_tar_gz(archive, tmp_path)

    def test_corrupt_zip(self, tmp_path):
        """Test a corrupt zip raises FilesystemError."""
        archive = tmp_path / "bad.zip"
        archive.write_bytes(b"not a zip")

        with pytest.raises(FilesystemError):
            extract_zip(archive, tmp_path)


# ============================================================================
# Links and Permissions
# ============================================================================


@pytest.mark.posix_only
class TestLinksAndPermissions:
    """Test symlinks and executable bits."""

    def test_make_executable(self, tmp_path):
        """Test execute bits are added for user, group and other."""
        target = tmp_path / "privado"
        target.write_text("#!/bin/sh\n")
        target.chmod(0o644)

        make_executable(target)

        mode = target.stat().st_mode
        assert mode & stat.S_IXUSR
        assert mode & stat.S_IXGRP
        assert mode & stat.S_IXOTH
        assert os.access(target, os.X_OK)

    def test_make_executable_missing(self, tmp_path):
        """Test a missing file raises FilesystemError."""
        with pytest.raises(FilesystemError):
            make_executable(tmp_path / "missing")

    def test_replace_symlink_creates(self, tmp_path):
        """Test a new link is created."""
        target = tmp_path / "privado"
        target.write_text("x")
        link = tmp_path / "bin" / "privado"

        replace_symlink(target, link)

        assert link.is_symlink()
        assert Path(os.readlink(link)) == target

    def test_replace_symlink_overwrites_link(self, tmp_path):
        """Test an existing link is replaced."""
        old_target = tmp_path / "old"
        old_target.write_text("old")
        new_target = tmp_path / "new"
        new_target.write_text("new")
        link = tmp_path / "privado"
        os.symlink(old_target, link)

        replace_symlink(new_target, link)

        assert link.read_text() == "new"

    def test_replace_symlink_overwrites_file(self, tmp_path):
        """Test a regular file at the link path is replaced."""
        target = tmp_path / "privado-real"
        target.write_text("real")
        link = tmp_path / "privado"
        link.write_text("stale copy")

        replace_symlink(target, link)

        assert link.is_symlink()

    def test_replace_symlink_refuses_directory(self, tmp_path):
        """Test a directory at the link path is left alone."""
        target = tmp_path / "privado-real"
        target.write_text("real")
        link = tmp_path / "privado"
        link.mkdir()

        with pytest.raises(FilesystemError, match="exists as a directory"):
            replace_symlink(target, link)

        assert link.is_dir()
