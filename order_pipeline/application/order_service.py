"""Order pipeline service: intake, processing, notification and results stages.

Each stage is bound to one queue. A stage always writes its change to the
order store before it publishes to the next queue, so a downstream consumer
never observes a payload that is ahead of the stored state.
"""

from __future__ import annotations

import asyncio
from typing import Any

from ..domain.constants import QueueNames, StageDefaults
from ..domain.exceptions import OrderNotFoundException, OrderValidationException
from ..domain.models import NotificationPayload, Order, OrderRequest, ResultPayload
from ..domain.pricing import validate_order_input
from ..ports.logger import LoggerPort
from ..ports.message_broker import MessageBrokerPort
from ..ports.metrics import MetricsPort
from ..ports.order_repository import OrderRepositoryPort


def format_confirmation(email: str) -> str:
    """Confirmation text stored on the order once the email went out."""
    return f"Email sent to {email}"


def render_email(notification: NotificationPayload) -> str:
    """Render the simulated confirmation email."""
    total_line = f"   Total: ${notification.total:.2f}"
    if notification.discount > 0:
        total_line += f" (discount: ${notification.discount:.2f})"
    rule = "=" * 43
    return "\n".join(
        [
            rule,
            "EMAIL SENT",
            f"   To: {notification.email}",
            f"   Subject: Order {notification.order_number} confirmed",
            f"   Product: {notification.product} x{notification.quantity}",
            total_line,
            rule,
        ]
    )


class OrderService:
    """Drives orders through the orders -> notifications -> results pipeline."""

    def __init__(
        self,
        broker: MessageBrokerPort,
        order_repository: OrderRepositoryPort,
        logger: LoggerPort,
        metrics: MetricsPort,
        processing_delay: float = StageDefaults.PROCESSING_DELAY,
        notification_delay: float = StageDefaults.NOTIFICATION_DELAY,
    ):
        """Initialize order service."""
        self._broker = broker
        self._order_repository = order_repository
        self._logger = logger
        self._metrics = metrics
        self._processing_delay = processing_delay
        self._notification_delay = notification_delay

    async def start(self) -> None:
        """Subscribe every stage handler to its queue."""
        await self._broker.subscribe(QueueNames.ORDERS, self.process_order)
        await self._broker.subscribe(QueueNames.NOTIFICATIONS, self.process_notification)
        await self._broker.subscribe(QueueNames.RESULTS, self.log_result)
        self._logger.info("Order pipeline consumers registered")

    # -------------------- Intake --------------------

    async def submit_order(self, request: OrderRequest) -> Order:
        """Validate, price and store a new order, then hand it to the pipeline.

        Raises:
            OrderValidationException: If the request is invalid. Nothing is
                stored or published in that case.
        """
        reason = validate_order_input(request.product, request.quantity, request.email)
        if reason:
            self._metrics.increment("orders.rejected")
            raise OrderValidationException(reason)

        order = Order.create(
            product=request.product,
            quantity=request.quantity,
            email=request.email,
        )
        await self._order_repository.save(order)
        await self._broker.publish(QueueNames.ORDERS, order)

        self._metrics.increment("orders.created")
        self._logger.info(
            f"Created order {order.order_number} - {order.product} x{order.quantity}, "
            f"total ${order.total:.2f}",
            order_id=order.id,
        )
        return order

    # -------------------- Processing --------------------

    async def process_order(self, message: dict[str, Any]) -> None:
        """Mark an order processed and publish its notification payload.

        Redelivery repeats the (idempotent) transition and publishes the
        notification again; duplicates are not suppressed.
        """
        order = Order.model_validate(message)
        self._logger.info(f"Processing order {order.order_number}...", order_id=order.id)

        await asyncio.sleep(self._processing_delay)

        processed = await self._order_repository.update(order.id, Order.mark_processed)
        if processed is None:
            self._logger.warning(
                f"Order {order.order_number} not in store, recording it as processed",
                order_id=order.id,
            )
            processed = order.mark_processed()
            await self._order_repository.save(processed)

        await self._broker.publish(
            QueueNames.NOTIFICATIONS, NotificationPayload.from_order(processed)
        )

        self._metrics.increment("orders.processed")
        self._logger.info(
            f"Order {processed.order_number} processed - Total: ${processed.total:.2f}",
            order_id=processed.id,
        )

    # -------------------- Notification --------------------

    async def process_notification(self, message: dict[str, Any]) -> None:
        """Simulate sending the confirmation email and record it on the order.

        A missing order does not abort the stage: the result is still
        published, with no unit price.
        """
        notification = NotificationPayload.model_validate(message)
        self._logger.info(f"Sending notification to {notification.email}...")

        await asyncio.sleep(self._notification_delay)

        self._logger.info(render_email(notification))
        confirmation = format_confirmation(notification.email)

        order = await self._order_repository.update(
            notification.order_id, lambda current: current.with_notification(confirmation)
        )
        if order is None:
            self._metrics.increment("notifications.order_missing")
            self._logger.warning(
                f"Order {notification.order_number} not found, notification not recorded",
                order_id=notification.order_id,
            )

        result = ResultPayload(
            order_id=notification.order_id,
            order_number=notification.order_number,
            product=notification.product,
            quantity=notification.quantity,
            unit_price=order.unit_price if order else None,
            total=notification.total,
            discount=notification.discount,
            notification=confirmation,
        )
        await self._broker.publish(QueueNames.RESULTS, result)
        self._metrics.increment("notifications.sent")

    # -------------------- Results --------------------

    async def log_result(self, message: dict[str, Any]) -> None:
        """Record the terminal result of an order."""
        result = ResultPayload.model_validate(message)
        self._metrics.increment("results.logged")
        self._logger.info(
            f"Final result processed: {result.order_number} {result.status.value} - "
            f"{result.notification}",
            order_id=result.order_id,
        )

    # -------------------- Queries --------------------

    async def get_order(self, order_id: str) -> Order:
        """Get an order by ID.

        Raises:
            OrderNotFoundException: If no order has this ID
        """
        order = await self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundException(order_id)
        return order

    async def list_orders(self) -> list[Order]:
        """Snapshot of every stored order."""
        return await self._order_repository.list()
