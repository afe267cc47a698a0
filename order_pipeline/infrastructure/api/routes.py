"""API routes for the order pipeline front door.

This module defines all FastAPI routes, keeping the web framework
concerns separate from the business logic.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from ...application.order_service import OrderService
from ...domain.models import BrokerState, Order, OrderRequest
from ...ports.message_broker import MessageBrokerPort
from ...ports.metrics import MetricsPort
from .dependencies import get_broker, get_metrics, get_order_service

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """API response model for health endpoint."""

    status: str
    timestamp: str
    broker: BrokerState
    metrics: dict[str, Any]


router = APIRouter()


@router.post("/api/orders", response_model=Order, status_code=status.HTTP_201_CREATED)
async def create_order(
    request: OrderRequest,
    order_service: OrderService = Depends(get_order_service),  # noqa: B008
) -> Order:
    """Accept an order and hand it to the pipeline."""
    return await order_service.submit_order(request)


@router.get("/api/orders", response_model=list[Order])
async def list_orders(
    order_service: OrderService = Depends(get_order_service),  # noqa: B008
) -> list[Order]:
    """List every stored order."""
    return await order_service.list_orders()


@router.get("/api/orders/{order_id}", response_model=Order)
async def get_order(
    order_id: str,
    order_service: OrderService = Depends(get_order_service),  # noqa: B008
) -> Order:
    """Get a single order.

    Raises:
        OrderNotFoundException: Mapped to 404 by the error handlers
    """
    return await order_service.get_order(order_id)


@router.get("/health", response_model=HealthResponse)
async def health_check(
    broker: MessageBrokerPort = Depends(get_broker),  # noqa: B008
    metrics: MetricsPort = Depends(get_metrics),  # noqa: B008
) -> HealthResponse:
    """Liveness of the HTTP process plus the broker connection state."""
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(UTC).isoformat(),
        broker=broker.state,
        metrics=metrics.get_all(),
    )
