"""
Global pytest configuration and fixtures.
Provides service fixtures for proper dependency injection in tests.
"""

import os

import pytest

from config_factory import AppConfig, Environment
from container import build_container
from tests.helpers.socket_mocks import FakeClock, FakeTimerFactory, create_mock_socketio

# Ensure testing environment
os.environ['TESTING'] = '1'


@pytest.fixture(scope="function")
def mock_socketio():
    """Mock SocketIO recording every emitted frame."""
    return create_mock_socketio()


@pytest.fixture(scope="function")
def fake_clock():
    return FakeClock()


@pytest.fixture(scope="function")
def timer_factory():
    return FakeTimerFactory()


@pytest.fixture(scope="function")
def app_config():
    return AppConfig(environment=Environment.TESTING)


@pytest.fixture(scope="function")
def container(mock_socketio, app_config, fake_clock, timer_factory):
    """Create service container with fake transport and time."""
    return build_container(
        socketio=mock_socketio,
        app_config=app_config,
        clock=fake_clock,
        timer_factory=timer_factory
    )


@pytest.fixture(scope="function")
def room_manager(container):
    """Provide RoomManager through dependency injection."""
    return container.get('RoomManager')


@pytest.fixture(scope="function")
def expiration_scheduler(container):
    """Provide ExpirationScheduler through dependency injection."""
    return container.get('ExpirationScheduler')


@pytest.fixture(scope="function")
def lifecycle_service(container):
    """Provide RoomLifecycleService through dependency injection."""
    return container.get('RoomLifecycleService')


@pytest.fixture(scope="function")
def room_handler(container):
    """Provide RoomConnectionHandler through dependency injection."""
    return container.get('RoomConnectionHandler')


@pytest.fixture(scope="function")
def game_handler(container):
    """Provide GameActionHandler through dependency injection."""
    return container.get('GameActionHandler')


@pytest.fixture(scope="function")
def router(container):
    """Provide a MessageRouter wired to the handlers."""
    from math_challenge.handlers.socket_handlers import create_router
    return create_router(container)
