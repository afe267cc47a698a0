"""Domain exceptions for the order pipeline.

Custom exceptions that represent domain-specific errors.
"""


class DomainException(Exception):
    """Base exception for all domain-related errors."""

    def __init__(self, message: str, error_code: str):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class OrderValidationException(DomainException):
    """Raised when an order request fails input validation."""

    def __init__(self, message: str):
        super().__init__(message, "VALIDATION_ERROR")


class OrderNotFoundException(DomainException):
    """Raised when an order id is not present in the store."""

    def __init__(self, order_id: str):
        super().__init__("Order not found", "ORDER_NOT_FOUND")
        self.order_id = order_id


class InvalidStatusTransitionException(DomainException):
    """Raised when an order is asked to move to a status it cannot reach."""

    def __init__(self, order_id: str, current: str, target: str):
        super().__init__(
            f"Order '{order_id}' cannot transition from {current} to {target}",
            "INVALID_STATUS_TRANSITION",
        )
        self.order_id = order_id


class ConfigurationException(DomainException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str):
        super().__init__(message, "CONFIGURATION_ERROR")


class BrokerException(DomainException):
    """Base class for message broker errors."""


class BrokerConnectionException(BrokerException):
    """Raised when the broker cannot be reached after all connection attempts."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message, "BROKER_CONNECTION_ERROR")
        self.attempts = attempts


class BrokerNotConnectedException(BrokerException):
    """Raised when a broker operation is attempted without a live connection."""

    def __init__(self, operation: str):
        super().__init__(
            f"Broker not connected. Cannot perform '{operation}' operation.",
            "BROKER_NOT_CONNECTED",
        )
        self.operation = operation


class SerializationException(BrokerException):
    """Raised when a message body cannot be encoded or decoded."""

    def __init__(self, message: str):
        super().__init__(message, "SERIALIZATION_ERROR")
