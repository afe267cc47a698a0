"""In-memory implementation of the order repository."""

from __future__ import annotations

import asyncio
import inspect

from ..domain.models import Order
from ..ports.order_repository import OrderMutator, OrderRepositoryPort


class InMemoryOrderRepository(OrderRepositoryPort):
    """Order store guarded by a single asyncio lock.

    Orders are immutable, so handing out references never exposes a record
    to mutation outside the lock; ``update`` swaps in a new record.
    """

    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}
        self._lock = asyncio.Lock()

    async def save(self, order: Order) -> None:
        """Save or replace an order."""
        async with self._lock:
            self._orders[order.id] = order

    async def get(self, order_id: str) -> Order | None:
        """Get an order by ID."""
        async with self._lock:
            return self._orders.get(order_id)

    async def list(self) -> list[Order]:
        """Snapshot of all orders in insertion order."""
        async with self._lock:
            return list(self._orders.values())

    async def count(self) -> int:
        async with self._lock:
            return len(self._orders)

    async def update(self, order_id: str, mutator: OrderMutator) -> Order | None:
        """Read-modify-write one order under the store lock.

        The lock is held across an awaiting mutator, so no other write can
        land between the read and the replace.
        """
        async with self._lock:
            current = self._orders.get(order_id)
            if current is None:
                return None
            updated = mutator(current)
            if inspect.isawaitable(updated):
                updated = await updated
            self._orders[order_id] = updated
            return updated
