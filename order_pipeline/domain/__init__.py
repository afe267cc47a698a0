"""Domain layer - order entity, payloads, pricing and exceptions."""

from .constants import QueueNames
from .exceptions import (
    BrokerConnectionException,
    BrokerNotConnectedException,
    ConfigurationException,
    DomainException,
    InvalidStatusTransitionException,
    OrderNotFoundException,
    OrderValidationException,
    SerializationException,
)
from .models import (
    BrokerState,
    NotificationPayload,
    Order,
    OrderRequest,
    OrderStatus,
    ResultPayload,
)
from .pricing import PriceBreakdown, calculate_price, validate_order_input

__all__ = [
    "BrokerConnectionException",
    "BrokerNotConnectedException",
    "BrokerState",
    "ConfigurationException",
    "DomainException",
    "InvalidStatusTransitionException",
    "NotificationPayload",
    "Order",
    "OrderNotFoundException",
    "OrderRequest",
    "OrderStatus",
    "OrderValidationException",
    "PriceBreakdown",
    "QueueNames",
    "ResultPayload",
    "SerializationException",
    "calculate_price",
    "validate_order_input",
]
