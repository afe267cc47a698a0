"""Port for order persistence operations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from ..domain.models import Order

# May be a coroutine function; it runs inside the store's critical section
OrderMutator = Callable[[Order], Order | Awaitable[Order]]


class OrderRepositoryPort(ABC):
    """Keyed store of orders shared by the front door and the pipeline stages."""

    @abstractmethod
    async def save(self, order: Order) -> None:
        """Insert or replace an order."""

    @abstractmethod
    async def get(self, order_id: str) -> Order | None:
        """Get an order by ID."""

    @abstractmethod
    async def list(self) -> list[Order]:
        """Return a snapshot of all orders in insertion order."""

    @abstractmethod
    async def count(self) -> int:
        """Count total orders."""

    @abstractmethod
    async def update(self, order_id: str, mutator: OrderMutator) -> Order | None:
        """Atomically replace an order with ``mutator(order)``.

        Returns:
            The stored result, or None if the order does not exist
        """
