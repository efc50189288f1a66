"""Shared fixtures for integration tests."""

import os

import pytest

from crewlink.board.core import load_settings

# Skip all integration tests unless RUN_CREWLINK_NETWORK_TESTS=1
pytestmark = pytest.mark.skipif(
    os.environ.get("RUN_CREWLINK_NETWORK_TESTS") != "1",
    reason="Requires network access. Set RUN_CREWLINK_NETWORK_TESTS=1 to run",
)


@pytest.fixture
def live_settings():
    """Settings from the environment; needs a real token and board ids."""
    return load_settings()
