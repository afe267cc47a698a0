"""Delivery handling shared by the broker adapters."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from ..domain.models import BrokerState
from ..ports.logger import LoggerPort
from ..ports.message_broker import MessageBrokerPort, MessageHandler
from ..ports.metrics import MetricsPort
from .config import BrokerConnectionConfig, LogContext
from .serialization import decode_message

Settle = Callable[[], Awaitable[None]]


class BaseBrokerAdapter(MessageBrokerPort):
    """Common state and at-least-once delivery semantics for broker adapters.

    Subclasses provide the transport; this class decides what happens to a
    delivery: ack after the handler returns, reject without requeue when
    decoding or the handler fails.
    """

    def __init__(
        self,
        config: BrokerConnectionConfig,
        logger: LoggerPort,
        metrics: MetricsPort,
    ):
        self._config = config
        self._logger = logger
        self._metrics = metrics
        self._state = BrokerState.DISCONNECTED

    @property
    def state(self) -> BrokerState:
        return self._state

    def _set_state(self, state: BrokerState) -> None:
        self._state = state
        self._metrics.gauge("broker.connected", 1 if state == BrokerState.CONNECTED else 0)

    async def _dispatch(
        self,
        queue: str,
        body: bytes,
        handler: MessageHandler,
        ack: Settle,
        reject: Settle,
    ) -> None:
        """Run one delivery through ``handler`` and settle it."""
        log_ctx = LogContext(queue=queue, operation="consume", component=type(self).__name__)
        try:
            payload = decode_message(body)
            with self._metrics.timer(f"messages.handle.{queue}"):
                await handler(payload)
        except Exception as e:
            self._metrics.increment(f"messages.failed.{queue}")
            self._logger.exception(
                f'Error processing message from queue "{queue}"',
                exc_info=e,
                **log_ctx.with_error(e).to_dict(),
            )
            await self._dead_letter(queue, body, e)
            # Dropped, not redelivered
            await reject()
            return

        await ack()
        self._metrics.increment(f"messages.acked.{queue}")

    async def _dead_letter(self, queue: str, body: bytes, error: Exception) -> None:
        dead_letter_queue = self._config.dead_letter_queue
        if not dead_letter_queue or dead_letter_queue == queue:
            return
        try:
            await self.publish(
                dead_letter_queue,
                {
                    "sourceQueue": queue,
                    "error": str(error),
                    "body": body.decode("utf-8", errors="replace"),
                },
            )
            self._metrics.increment(f"messages.dead_lettered.{queue}")
        except Exception as e:
            self._logger.error(
                f'Failed to dead-letter message from queue "{queue}": {e}',
                queue=queue,
            )
