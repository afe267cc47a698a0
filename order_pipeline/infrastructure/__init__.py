"""Infrastructure layer - adapters for the broker, store, logging and metrics."""

from .factory import InfrastructureFactory
from .in_memory_broker import InMemoryBrokerAdapter
from .in_memory_metrics import InMemoryMetrics
from .in_memory_order_repository import InMemoryOrderRepository
from .nats_broker import NATSBrokerAdapter
from .simple_logger import SimpleLogger

__all__ = [
    "InMemoryBrokerAdapter",
    "InMemoryMetrics",
    "InMemoryOrderRepository",
    "InfrastructureFactory",
    "NATSBrokerAdapter",
    "SimpleLogger",
]
