"""Shared test fixtures for the levelctl test suite.

Provides common fixtures used across unit tests: device controllers,
session handlers, sessions, and shutdown tokens.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from levelctl.device.base import DeviceController
from levelctl.device.memory import MemoryDeviceController
from levelctl.domain.models import Session
from levelctl.server.session import SessionHandler
from levelctl.server.shutdown import ShutdownToken


# ---------------------------------------------------------------------------
# Device Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_controller() -> MemoryDeviceController:
    """An in-memory controller that accepts every level."""
    return MemoryDeviceController()


@pytest.fixture
def mock_controller() -> AsyncMock:
    """A mock DeviceController with all async methods stubbed."""
    return AsyncMock(spec=DeviceController)


# ---------------------------------------------------------------------------
# Session Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def handler(memory_controller: MemoryDeviceController) -> SessionHandler:
    return SessionHandler(memory_controller)


@pytest.fixture
def session() -> Session:
    return Session(peer_address="192.168.1.50")


@pytest.fixture
def shutdown() -> ShutdownToken:
    return ShutdownToken()
