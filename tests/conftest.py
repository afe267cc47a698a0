"""Pytest configuration and shared fixtures for the order pipeline."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from order_pipeline.domain.models import Order, ServiceConfiguration
from order_pipeline.infrastructure.in_memory_order_repository import InMemoryOrderRepository


@pytest.fixture
def mock_broker():
    """Create a mock message broker for testing."""
    mock = AsyncMock()
    mock.is_connected = AsyncMock(return_value=True)
    mock.connect = AsyncMock()
    mock.publish = AsyncMock()
    mock.subscribe = AsyncMock()
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing."""
    mock = MagicMock()
    mock.info = MagicMock()
    mock.warning = MagicMock()
    mock.error = MagicMock()
    mock.debug = MagicMock()
    mock.exception = MagicMock()
    return mock


@pytest.fixture
def mock_metrics():
    """Create a mock metrics for testing."""
    mock = MagicMock()
    mock.increment = MagicMock()
    mock.gauge = MagicMock()
    mock.record = MagicMock()
    mock.timer = MagicMock()
    mock.get_all = MagicMock(
        return_value={"uptime_seconds": 100, "counters": {}, "gauges": {}, "summaries": {}}
    )
    # Make timer return a context manager
    mock.timer.return_value.__enter__ = MagicMock(return_value=None)
    mock.timer.return_value.__exit__ = MagicMock(return_value=None)
    return mock


@pytest.fixture
def order_repository():
    """Create an empty in-memory order store."""
    return InMemoryOrderRepository()


@pytest.fixture
def sample_order():
    """A pending laptop order priced with the bulk discount."""
    return Order.create(
        product="laptop",
        quantity=6,
        email="a@b.com",
        now=datetime(2024, 1, 15, 10, 30, tzinfo=UTC),
    )


@pytest.fixture
def memory_config():
    """Service configuration for an in-process pipeline with no simulated delays."""
    return ServiceConfiguration(
        broker_url="memory://local",
        broker_backend="memory",
        connect_max_attempts=1,
        connect_retry_interval=0.0,
        processing_delay=0.0,
        notification_delay=0.0,
    )
