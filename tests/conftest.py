"""Shared pytest fixtures for Firefly client tests."""

import pytest

from tests.infrastructure.mock_control_plane import MockControlPlane


@pytest.fixture
def control_plane():
    """Mock Firefly API with a working login endpoint."""
    plane = MockControlPlane()
    plane.add_login()
    return plane


@pytest.fixture
def api_client(control_plane):
    """Client wired to the mock control plane."""
    client = control_plane.create_client()
    yield client
    client.close()
