"""Unit tests for the order entity and pipeline payloads."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from order_pipeline.domain.exceptions import InvalidStatusTransitionException
from order_pipeline.domain.models import (
    NotificationPayload,
    Order,
    OrderRequest,
    OrderStatus,
    ResultPayload,
    ServiceConfiguration,
    generate_order_number,
)


class TestOrderCreate:
    """Test order creation."""

    def test_create_assigns_identity_and_price(self, sample_order):
        """Test a new order is pending and priced."""
        assert sample_order.id
        assert sample_order.status == OrderStatus.PENDING
        assert sample_order.notification is None
        assert sample_order.unit_price == 999.0
        assert sample_order.subtotal == 5994.0
        assert sample_order.discount == 599.4
        assert sample_order.total == 5394.6

    def test_ids_are_unique(self):
        """Test every created order gets its own id."""
        ids = {Order.create("mouse", 1, "a@b.com").id for _ in range(50)}
        assert len(ids) == 50

    def test_order_number_uses_last_six_millisecond_digits(self):
        """Test the display code format."""
        created_at = datetime(2024, 1, 15, 10, 30, 0, 123000, tzinfo=UTC)

        assert generate_order_number(created_at) == "#ORD-600123"

    def test_rejects_invalid_email(self):
        """Test the entity refuses an address without @."""
        with pytest.raises(ValidationError):
            Order.create("laptop", 1, "not-an-email")

    def test_rejects_blank_product(self):
        """Test the entity refuses a blank product."""
        with pytest.raises(ValidationError):
            Order.create("  ", 1, "a@b.com")


class TestOrderTransitions:
    """Test order status transitions."""

    def test_mark_processed_returns_new_record(self, sample_order):
        """Test pending -> processed leaves the original untouched."""
        processed = sample_order.mark_processed()

        assert processed.status == OrderStatus.PROCESSED
        assert sample_order.status == OrderStatus.PENDING
        assert processed.id == sample_order.id

    def test_mark_processed_is_idempotent(self, sample_order):
        """Test processed -> processed is a no-op."""
        processed = sample_order.mark_processed()

        assert processed.mark_processed() is processed

    def test_error_order_cannot_be_processed(self, sample_order):
        """Test error -> processed is refused."""
        failed = sample_order.model_copy(update={"status": OrderStatus.ERROR})

        with pytest.raises(InvalidStatusTransitionException) as exc_info:
            failed.mark_processed()

        assert exc_info.value.error_code == "INVALID_STATUS_TRANSITION"

    def test_first_notification_wins(self, sample_order):
        """Test a second notification does not overwrite the first."""
        first = sample_order.with_notification("Email sent to a@b.com")
        second = first.with_notification("Email sent to other@b.com")

        assert second.notification == "Email sent to a@b.com"


class TestWireFormat:
    """Test camelCase wire representation."""

    def test_order_serializes_with_camel_case(self, sample_order):
        """Test the wire names of an order."""
        message = sample_order.to_message()

        assert message["orderNumber"] == sample_order.order_number
        assert message["unitPrice"] == 999.0
        assert message["status"] == "pending"
        assert message["notification"] is None
        assert "createdAt" in message
        assert "order_number" not in message

    def test_order_parses_from_wire_dict(self, sample_order):
        """Test an order survives the trip through its JSON representation."""
        parsed = Order.model_validate(sample_order.to_message())

        assert parsed == sample_order

    def test_order_rejects_unknown_fields(self, sample_order):
        """Test extra fields on an order are refused."""
        message = {**sample_order.to_message(), "surprise": 1}

        with pytest.raises(ValidationError):
            Order.model_validate(message)

    def test_notification_payload_from_order(self, sample_order):
        """Test the projection handed to the notification stage."""
        payload = NotificationPayload.from_order(sample_order)

        assert payload.to_message() == {
            "orderId": sample_order.id,
            "orderNumber": sample_order.order_number,
            "email": "a@b.com",
            "product": "laptop",
            "quantity": 6,
            "total": 5394.6,
            "discount": 599.4,
        }

    def test_result_payload_defaults(self):
        """Test a result is processed and may lack a unit price."""
        result = ResultPayload.model_validate(
            {
                "orderId": "o-1",
                "orderNumber": "#ORD-000001",
                "product": "phone",
                "quantity": 1,
                "total": 599,
                "discount": 0,
                "notification": "Email sent to a@b.com",
            }
        )

        assert result.status == OrderStatus.PROCESSED
        assert result.unit_price is None

    def test_order_request_fields_are_optional(self):
        """Test a request may omit every field."""
        request = OrderRequest.model_validate({})

        assert request.product is None
        assert request.quantity is None
        assert request.email is None


class TestServiceConfiguration:
    """Test service configuration validation."""

    def test_defaults(self):
        """Test defaults for everything but the broker URL."""
        config = ServiceConfiguration(broker_url="nats://localhost:4222")

        assert config.broker_backend == "nats"
        assert config.api_port == 3001
        assert config.connect_max_attempts == 10
        assert config.connect_retry_interval == 3.0
        assert config.dead_letter_queue is None

    def test_rejects_unknown_scheme(self):
        """Test an unsupported broker URL scheme is refused."""
        with pytest.raises(ValidationError):
            ServiceConfiguration(broker_url="amqp://localhost")
