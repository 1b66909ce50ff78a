"""Release archive fixtures.

Builds small tar.gz and zip archives shaped like published Privado CLI
releases, together with their MD5 sidecar contents.
"""

import hashlib
import io
import tarfile
import zipfile
from dataclasses import dataclass
from pathlib import Path

import pytest

EXECUTABLE_CONTENT = b"#!/bin/sh\necho privado\n"


@dataclass
class ReleaseArchive:
    """A built release archive and its expected digest."""

    path: Path
    data: bytes
    md5: str


def build_tar_gz(members: dict, mode: int = 0o644) -> bytes:
    """Build a gzip-compressed tar from a {name: bytes} mapping."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = mode
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def build_zip(members: dict) -> bytes:
    """Build a ZIP archive from a {name: bytes} mapping."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in members.items():
            zf.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def release_archive_factory(tmp_path):
    """
    Factory writing a release archive under tmp_path/release.

    Example:
        def test_x(release_archive_factory):
            archive = release_archive_factory("privado-linux-amd64.tar.gz",
                                              {"privado": b"..."})
    """
    release_dir = tmp_path / "release"
    release_dir.mkdir(exist_ok=True)

    def _factory(name: str, members: dict, mode: int = 0o644) -> ReleaseArchive:
        if name.endswith(".zip"):
            data = build_zip(members)
        else:
            data = build_tar_gz(members, mode=mode)
        path = release_dir / name
        path.write_bytes(data)
        return ReleaseArchive(path=path, data=data, md5=hashlib.md5(data).hexdigest())

    return _factory


@pytest.fixture
def linux_release(release_archive_factory) -> ReleaseArchive:
    """Linux amd64 release containing the 'privado' executable."""
    return release_archive_factory(
        "privado-linux-amd64.tar.gz", {"privado": EXECUTABLE_CONTENT}
    )


@pytest.fixture
def windows_release(release_archive_factory) -> ReleaseArchive:
    """Windows amd64 release containing 'privado.exe'."""
    return release_archive_factory(
        "privado-windows-amd64.zip", {"privado.exe": b"MZ fake executable"}
    )
