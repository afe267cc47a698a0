"""NATS JetStream adapter - Concrete implementation of MessageBrokerPort.

Each pipeline queue maps to a file-backed work-queue stream whose single
subject is the queue name. A work-queue stream removes a message once its
consumer acknowledges or terminates it, which gives the pipeline durable
queues with at-least-once delivery.
"""

from __future__ import annotations

import asyncio
from typing import Any

import nats
from nats.aio.client import Client as NATSClient
from nats.aio.msg import Msg
from nats.js import JetStreamContext
from nats.js.api import RetentionPolicy, StorageType, StreamConfig
from nats.js.errors import NotFoundError
from pydantic import BaseModel

from ..domain.exceptions import BrokerConnectionException, BrokerNotConnectedException
from ..domain.models import BrokerState
from ..ports.logger import LoggerPort
from ..ports.message_broker import MessageHandler
from ..ports.metrics import MetricsPort
from .broker_base import BaseBrokerAdapter
from .config import BrokerConnectionConfig, LogContext
from .in_memory_metrics import InMemoryMetrics
from .serialization import encode_message
from .simple_logger import SimpleLogger


def stream_name_for(queue: str) -> str:
    """Return the JetStream stream backing a queue (stream names allow no dots)."""
    return queue.upper().replace(".", "_").replace("-", "_")


class NATSBrokerAdapter(BaseBrokerAdapter):
    """JetStream implementation of the message broker port."""

    def __init__(
        self,
        config: BrokerConnectionConfig | None = None,
        logger: LoggerPort | None = None,
        metrics: MetricsPort | None = None,
    ):
        """Initialize the adapter.

        Args:
            config: Connection configuration. If not provided, uses defaults.
            logger: Optional logger port.
            metrics: Optional metrics port.
        """
        super().__init__(
            config=config or BrokerConnectionConfig(),
            logger=logger or SimpleLogger("order_pipeline.broker"),
            metrics=metrics or InMemoryMetrics(),
        )
        self._nc: NATSClient | None = None
        self._js: JetStreamContext | None = None
        self._subscriptions: list[Any] = []
        self._declared_queues: set[str] = set()

    async def connect(self) -> None:
        """Connect to NATS and open a JetStream context, retrying on failure."""
        if self._state == BrokerState.CONNECTED:
            return
        if self._state == BrokerState.CLOSED:
            raise BrokerConnectionException("Broker client has been closed")

        self._set_state(BrokerState.CONNECTING)
        max_attempts = self._config.max_connect_attempts
        interval = self._config.retry_interval

        for attempt in range(1, max_attempts + 1):
            log_ctx = LogContext(operation="connect", component="NATSBrokerAdapter", attempt=attempt)
            self._logger.info(f"Connecting to broker... (attempt {attempt})", **log_ctx.to_dict())
            try:
                nc = await nats.connect(
                    **self._config.to_connection_params(),
                    disconnected_cb=self._on_disconnected,
                    reconnected_cb=self._on_reconnected,
                    closed_cb=self._on_closed,
                )
            except Exception as e:
                self._metrics.increment("broker.connect.failures")
                self._logger.warning(
                    f"Error connecting to broker, retrying in {interval:g}s...",
                    **log_ctx.with_error(e).to_dict(),
                )
                if attempt < max_attempts:
                    await asyncio.sleep(interval)
                continue

            # Startup is retried above; drops after this point use client reconnect
            nc.options["allow_reconnect"] = True
            self._nc = nc
            self._js = nc.jetstream()
            self._set_state(BrokerState.CONNECTED)
            self._logger.info("Connected to broker successfully", **log_ctx.to_dict())
            return

        self._set_state(BrokerState.DISCONNECTED)
        raise BrokerConnectionException(
            f"Could not connect to broker at {self._config.url} after {max_attempts} attempts",
            attempts=max_attempts,
        )

    async def _on_disconnected(self) -> None:
        if self._state != BrokerState.CONNECTED:
            return
        self._set_state(BrokerState.DISCONNECTED)
        self._metrics.increment("broker.disconnects")
        self._logger.warning(
            "Broker connection lost, client is reconnecting",
            operation="disconnect",
            component="NATSBrokerAdapter",
        )

    async def _on_reconnected(self) -> None:
        if self._state != BrokerState.DISCONNECTED or self._nc is None:
            return
        self._set_state(BrokerState.CONNECTED)
        self._logger.info(
            "Reconnected to broker", operation="reconnect", component="NATSBrokerAdapter"
        )

    async def _on_closed(self) -> None:
        if self._state in (BrokerState.CLOSED, BrokerState.CONNECTING):
            return
        self._set_state(BrokerState.DISCONNECTED)
        self._nc = None
        self._js = None
        self._logger.error(
            "Broker connection closed after reconnect attempts were exhausted",
            operation="close",
            component="NATSBrokerAdapter",
        )

    async def is_connected(self) -> bool:
        """Check if connected to NATS."""
        return (
            self._state == BrokerState.CONNECTED
            and self._nc is not None
            and self._nc.is_connected
        )

    def _require_jetstream(self, operation: str) -> JetStreamContext:
        if self._state != BrokerState.CONNECTED or self._js is None:
            raise BrokerNotConnectedException(operation)
        return self._js

    async def _declare_queue(self, queue: str) -> str:
        """Ensure the durable stream for ``queue`` exists. Idempotent."""
        stream = stream_name_for(queue)
        if queue in self._declared_queues:
            return stream

        js = self._require_jetstream("declare")
        try:
            await js.stream_info(stream)
        except NotFoundError:
            await js.add_stream(
                StreamConfig(
                    name=stream,
                    subjects=[queue],
                    retention=RetentionPolicy.WORK_QUEUE,
                    storage=StorageType.FILE,
                )
            )
            self._logger.info(f'Declared durable queue "{queue}"', queue=queue)

        self._declared_queues.add(queue)
        return stream

    async def publish(self, queue: str, message: BaseModel | dict[str, Any]) -> None:
        """Publish a persistent message and wait for the server acknowledgement."""
        js = self._require_jetstream("publish")
        stream = await self._declare_queue(queue)
        data = encode_message(message)

        with self._metrics.timer(f"messages.publish.{queue}"):
            await js.publish(queue, data, stream=stream)

        self._metrics.increment(f"messages.published.{queue}")
        self._logger.debug(f'Message published to queue "{queue}"', queue=queue)

    async def subscribe(self, queue: str, handler: MessageHandler) -> None:
        """Register a durable consumer with manual acknowledgement."""
        js = self._require_jetstream("subscribe")
        stream = await self._declare_queue(queue)

        async def wrapper(msg: Msg) -> None:
            await self._dispatch(queue, msg.data, handler, ack=msg.ack, reject=msg.term)

        subscription = await js.subscribe(
            queue,
            durable=f"{stream.lower()}-consumer",
            stream=stream,
            cb=wrapper,
            manual_ack=True,
        )
        self._subscriptions.append(subscription)
        self._logger.info(f'Subscribed to queue "{queue}"', queue=queue)

    async def close(self) -> None:
        """Unsubscribe consumers, then close the connection."""
        if self._state == BrokerState.CLOSED:
            return

        # Set first so the client callbacks fired by nc.close() are ignored
        self._set_state(BrokerState.CLOSED)

        for subscription in self._subscriptions:
            try:
                await subscription.unsubscribe()
            except Exception as e:
                self._logger.warning(f"Error releasing consumer: {e}")
        self._subscriptions.clear()
        self._js = None

        if self._nc is not None and not self._nc.is_closed:
            await self._nc.close()
        self._nc = None

        self._declared_queues.clear()
        self._logger.info("Broker connection closed")
