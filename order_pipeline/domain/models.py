"""Domain models for the order pipeline.

This module contains the Order entity and the transient payloads that travel
between pipeline stages. Field names are snake_case in Python and camelCase on
the wire.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .exceptions import InvalidStatusTransitionException
from .pricing import calculate_price


class OrderStatus(str, Enum):
    """Order status enumeration."""

    PENDING = "pending"
    PROCESSED = "processed"
    ERROR = "error"


class BrokerState(str, Enum):
    """Connection lifecycle of a broker client."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"


class WireModel(BaseModel):
    """Base for models that are exchanged as camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_message(self) -> dict:
        """Return the JSON-compatible wire representation."""
        return self.model_dump(mode="json", by_alias=True)


class OrderRequest(WireModel):
    """Caller-supplied order request. Every field may be missing."""

    product: str | None = Field(None, description="Product name")
    quantity: int | None = Field(None, description="Number of units")
    email: str | None = Field(None, description="Customer email for the confirmation")


_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def generate_order_number(created_at: datetime) -> str:
    """Derive the display code from the last six digits of the epoch milliseconds."""
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    millis = (created_at - _EPOCH) // timedelta(milliseconds=1)
    return f"#ORD-{str(millis)[-6:]}"


class Order(WireModel):
    """Order entity. Records are immutable; transitions return new records."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1, description="Unique order identifier")
    order_number: str = Field(..., description="Display code, not unique")
    product: str = Field(..., min_length=1, description="Product name")
    quantity: int = Field(..., ge=1, description="Number of units")
    email: str = Field(..., description="Customer email")
    unit_price: float = Field(..., ge=0)
    subtotal: float = Field(..., ge=0)
    discount: float = Field(..., ge=0)
    total: float = Field(..., ge=0)
    status: OrderStatus = Field(OrderStatus.PENDING, description="Order status")
    notification: str | None = Field(None, description="Delivery confirmation text")
    created_at: datetime = Field(..., description="Order creation timestamp")

    @field_validator("product")
    @classmethod
    def validate_product(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Product is required")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("Invalid email")
        return v

    @classmethod
    def create(
        cls,
        product: str,
        quantity: int,
        email: str,
        now: datetime | None = None,
    ) -> Order:
        """Create a pending order with identity and pricing assigned.

        Callers are expected to have validated the input first.
        """
        created_at = now or datetime.now(UTC)
        price = calculate_price(product, quantity)
        return cls(
            id=str(uuid.uuid4()),
            order_number=generate_order_number(created_at),
            product=product,
            quantity=quantity,
            email=email,
            unit_price=price.unit_price,
            subtotal=price.subtotal,
            discount=price.discount,
            total=price.total,
            status=OrderStatus.PENDING,
            created_at=created_at,
        )

    def mark_processed(self) -> Order:
        """Return the processed version of this order.

        processed -> processed is a no-op.
        """
        if self.status == OrderStatus.PROCESSED:
            return self
        if self.status != OrderStatus.PENDING:
            raise InvalidStatusTransitionException(
                self.id, self.status.value, OrderStatus.PROCESSED.value
            )
        return self.model_copy(update={"status": OrderStatus.PROCESSED})

    def with_notification(self, notification: str) -> Order:
        """Return this order with its notification set. The first value wins."""
        if self.notification:
            return self
        return self.model_copy(update={"notification": notification})


class NotificationPayload(WireModel):
    """Projection of an order handed from the processing to the notification stage."""

    order_id: str
    order_number: str
    email: str
    product: str
    quantity: int
    total: float
    discount: float

    @classmethod
    def from_order(cls, order: Order) -> NotificationPayload:
        return cls(
            order_id=order.id,
            order_number=order.order_number,
            email=order.email,
            product=order.product,
            quantity=order.quantity,
            total=order.total,
            discount=order.discount,
        )


class ResultPayload(WireModel):
    """Terminal record of a completed order, consumed for observability only."""

    order_id: str
    order_number: str
    product: str
    quantity: int
    unit_price: float | None = Field(None, description="None when the order was not in the store")
    total: float
    discount: float
    status: OrderStatus = OrderStatus.PROCESSED
    notification: str


class ServiceConfiguration(BaseModel):
    """Domain model representing the runtime configuration of the service."""

    model_config = ConfigDict(strict=True, frozen=True)

    broker_url: str = Field(..., description="Message broker connection URL")
    broker_backend: Literal["nats", "memory"] = Field("nats", description="Broker implementation")
    api_host: str = Field("0.0.0.0", description="HTTP listen address")  # nosec B104
    api_port: int = Field(3001, ge=1, le=65535, description="HTTP listen port")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field("INFO")
    connect_max_attempts: int = Field(10, ge=1, description="Broker connection attempts")
    connect_retry_interval: float = Field(3.0, ge=0, description="Seconds between attempts")
    processing_delay: float = Field(0.5, ge=0, description="Simulated processing work")
    notification_delay: float = Field(0.3, ge=0, description="Simulated delivery work")
    dead_letter_queue: str | None = Field(None, description="Queue for failed messages")

    @field_validator("broker_url")
    @classmethod
    def validate_broker_url(cls, v: str) -> str:
        """Validate broker URL format."""
        if not v.startswith(("nats://", "tls://", "ws://", "wss://", "memory://")):
            raise ValueError(
                f"Invalid broker URL: {v}. Must start with nats://, tls://, ws://, wss:// "
                "or memory://"
            )
        return v
