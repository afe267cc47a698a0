"""FastAPI dependency injection setup.

The composition root stores the connected adapters on ``app.state``; these
providers hand them to route handlers so routes never construct adapters.
"""

from __future__ import annotations

from fastapi import Request

from ...application.order_service import OrderService
from ...ports.message_broker import MessageBrokerPort
from ...ports.metrics import MetricsPort


def get_order_service(request: Request) -> OrderService:
    """Get the order service bound to this application.

    Returns:
        OrderService: Service instance created at startup
    """
    return request.app.state.order_service


def get_broker(request: Request) -> MessageBrokerPort:
    """Get the broker client bound to this application."""
    return request.app.state.broker


def get_metrics(request: Request) -> MetricsPort:
    return request.app.state.metrics
