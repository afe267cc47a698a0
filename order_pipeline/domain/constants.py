"""Queue topology and pricing constants shared across the pipeline.

This module defines technical constants used across layers,
NOT business logic.
"""

from __future__ import annotations


class QueueNames:
    """Durable queues connecting the pipeline stages."""

    ORDERS = "orders"
    NOTIFICATIONS = "notifications"
    RESULTS = "results"


class PricingDefaults:
    """Static pricing table and discount policy."""

    PRODUCT_PRICES: dict[str, float] = {
        "laptop": 999,
        "phone": 599,
        "tablet": 449,
        "monitor": 299,
        "keyboard": 89,
        "mouse": 49,
    }
    DEFAULT_PRICE = 99
    # Discount applies strictly above this quantity
    MIN_QUANTITY_FOR_DISCOUNT = 5
    DISCOUNT_PERCENTAGE = 0.10


class BrokerDefaults:
    """Default connection behaviour for the broker client."""

    URL = "nats://localhost:4222"
    MAX_CONNECT_ATTEMPTS = 10
    RETRY_INTERVAL_SECONDS = 3.0


class StageDefaults:
    """Simulated per-stage work, in seconds."""

    PROCESSING_DELAY = 0.5
    NOTIFICATION_DELAY = 0.3
