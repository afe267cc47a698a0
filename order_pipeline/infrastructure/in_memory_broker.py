"""In-process implementation of MessageBrokerPort.

Queues are asyncio queues living in this process, so nothing survives a
restart. Delivery semantics match the NATS adapter: one consumer task per
queue, FIFO, ack on success, drop on failure. Used for local runs without a
broker server and for exercising the whole pipeline in tests.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import Any

from pydantic import BaseModel

from ..domain.exceptions import BrokerConnectionException, BrokerNotConnectedException
from ..domain.models import BrokerState
from ..ports.logger import LoggerPort
from ..ports.message_broker import MessageHandler
from ..ports.metrics import MetricsPort
from .broker_base import BaseBrokerAdapter
from .config import BrokerConnectionConfig
from .in_memory_metrics import InMemoryMetrics
from .serialization import encode_message
from .simple_logger import SimpleLogger


async def _settled() -> None:
    """In-memory deliveries leave the queue on get; settling is a no-op."""


class InMemoryBrokerAdapter(BaseBrokerAdapter):
    """Message broker backed by asyncio queues."""

    def __init__(
        self,
        config: BrokerConnectionConfig | None = None,
        logger: LoggerPort | None = None,
        metrics: MetricsPort | None = None,
    ):
        super().__init__(
            config=config or BrokerConnectionConfig(url="memory://local"),
            logger=logger or SimpleLogger("order_pipeline.broker"),
            metrics=metrics or InMemoryMetrics(),
        )
        self._queues: dict[str, asyncio.Queue[bytes]] = {}
        self._consumers: dict[str, asyncio.Task[None]] = {}
        self._unsettled = 0
        self._idle = asyncio.Event()
        self._idle.set()

    async def connect(self) -> None:
        """Mark the broker connected. There is no remote end to fail."""
        if self._state == BrokerState.CONNECTED:
            return
        if self._state == BrokerState.CLOSED:
            raise BrokerConnectionException("Broker client has been closed")
        self._set_state(BrokerState.CONNECTED)
        self._logger.info("Connected to in-memory broker")

    async def is_connected(self) -> bool:
        return self._state == BrokerState.CONNECTED

    def _require_connected(self, operation: str) -> None:
        if self._state != BrokerState.CONNECTED:
            raise BrokerNotConnectedException(operation)

    def _declare_queue(self, queue: str) -> asyncio.Queue[bytes]:
        if queue not in self._queues:
            self._queues[queue] = asyncio.Queue()
        return self._queues[queue]

    async def publish(self, queue: str, message: BaseModel | dict[str, Any]) -> None:
        """Encode and enqueue a message."""
        self._require_connected("publish")
        data = encode_message(message)
        self._declare_queue(queue).put_nowait(data)

        self._unsettled += 1
        self._idle.clear()
        self._metrics.increment(f"messages.published.{queue}")
        self._logger.debug(f'Message published to queue "{queue}"', queue=queue)

    async def subscribe(self, queue: str, handler: MessageHandler) -> None:
        """Start the single consumer task for ``queue``."""
        self._require_connected("subscribe")
        if queue in self._consumers:
            raise ValueError(f'Queue "{queue}" already has a consumer')

        pending = self._declare_queue(queue)
        self._consumers[queue] = asyncio.create_task(
            self._consume(queue, pending, handler), name=f"consumer-{queue}"
        )
        self._logger.info(f'Subscribed to queue "{queue}"', queue=queue)

    async def _consume(
        self, queue: str, pending: asyncio.Queue[bytes], handler: MessageHandler
    ) -> None:
        while True:
            body = await pending.get()
            try:
                await self._dispatch(queue, body, handler, ack=_settled, reject=_settled)
            finally:
                pending.task_done()
                self._unsettled -= 1
                if self._unsettled == 0:
                    self._idle.set()

    def depth(self, queue: str) -> int:
        """Number of messages waiting in ``queue``."""
        pending = self._queues.get(queue)
        return pending.qsize() if pending else 0

    async def wait_until_idle(self, timeout: float | None = None) -> None:
        """Wait until every published message has been settled.

        Messages sitting in a queue without a consumer keep the broker busy.
        """
        await asyncio.wait_for(self._idle.wait(), timeout)

    async def close(self) -> None:
        """Cancel consumer tasks and drop all queues."""
        if self._state == BrokerState.CLOSED:
            return

        for task in self._consumers.values():
            task.cancel()
        for task in self._consumers.values():
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._consumers.clear()
        self._queues.clear()

        self._set_state(BrokerState.CLOSED)
        self._logger.info("In-memory broker closed")
