"""Test fixtures for canary-variants."""

import pytest

from .common import FakeClusterClient


@pytest.fixture(name="client")
def client_fixture() -> FakeClusterClient:
    """Fixture for a fake cluster client."""
    return FakeClusterClient()
