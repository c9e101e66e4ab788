"""Fixtures for integration tests running a fake engine."""

import shutil

import pytest

from ft_test_action.testing.engine import InstallEngineFn, install_fake_engine


@pytest.fixture
def install_engine() -> InstallEngineFn:
    """Return a function installing an executable fake engine."""
    if shutil.which("sh") is None:
        pytest.skip("fake engine requires a POSIX shell")
    return install_fake_engine
