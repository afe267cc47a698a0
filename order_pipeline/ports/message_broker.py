"""Message broker interface - Port definition for the pipeline's queues."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel

from ..domain.models import BrokerState

MessageHandler = Callable[[dict[str, Any]], Awaitable[None]]


class MessageBrokerPort(ABC):
    """Abstract interface for a durable, at-least-once queue broker.

    Implementations must declare queues durable, publish messages persistent,
    and acknowledge a delivery only after its handler returns. A handler
    failure is a negative acknowledgement without requeue.
    """

    @property
    @abstractmethod
    def state(self) -> BrokerState:
        """Current connection lifecycle state."""
        ...

    @abstractmethod
    async def connect(self) -> None:
        """Connect to the broker, retrying with a fixed interval.

        Raises:
            BrokerConnectionException: If every attempt fails
        """
        ...

    @abstractmethod
    async def is_connected(self) -> bool:
        """Check if connected to the broker."""
        ...

    @abstractmethod
    async def publish(self, queue: str, message: BaseModel | dict[str, Any]) -> None:
        """Publish a persistent message to a durable queue."""
        ...

    @abstractmethod
    async def subscribe(self, queue: str, handler: MessageHandler) -> None:
        """Register the single consumer of a durable queue."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release consumers and the connection. Idempotent."""
        ...
