"""
Pytest configuration and shared fixtures for privado-bootstrap tests.
"""

import pytest
from pathlib import Path

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.archives import (
    linux_release,
    windows_release,
    release_archive_factory,
)
from tests.fixtures.directories import (
    fake_home,
    install_settings,
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "posix_only: marks tests that need POSIX permissions or symlinks"
    )


def pytest_collection_modifyitems(config, items):
    """Skip POSIX-only tests on Windows."""
    import os

    if os.name != "nt":
        return
    skip_posix = pytest.mark.skip(reason="requires POSIX permissions and symlinks")
    for item in items:
        if "posix_only" in item.keywords:
            item.add_marker(skip_posix)


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Create isolated home directory and point HOME at it."""
    home = tmp_path / "isolated-home"
    home.mkdir()

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))

    return home


@pytest.fixture
def no_network(monkeypatch):
    """Disable network access for tests."""
    import socket

    def guard(*args, **kwargs):
        raise RuntimeError("Network access not allowed in this test")

    monkeypatch.setattr(socket, "socket", guard)
