"""Main entry point for the order pipeline service.

Startup order matters: the broker connection is established and the stage
consumers are registered before the HTTP server is created, so a broker that
cannot be reached leaves no listener behind.
"""

from __future__ import annotations

import asyncio
import logging
import sys

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .application.order_service import OrderService
from .domain.exceptions import BrokerConnectionException, ConfigurationException
from .domain.models import ServiceConfiguration
from .infrastructure.api import register_error_handlers, router
from .infrastructure.factory import InfrastructureFactory
from .logging_config import setup_logging
from .ports.message_broker import MessageBrokerPort
from .ports.metrics import MetricsPort

logger = logging.getLogger(__name__)


def create_app(
    order_service: OrderService,
    broker: MessageBrokerPort,
    metrics: MetricsPort,
) -> FastAPI:
    """Build the HTTP front door around already-connected adapters."""
    app = FastAPI(
        title="Order Pipeline",
        description="Order intake front door for the queue-driven order pipeline",
        version=__version__,
    )
    app.state.order_service = order_service
    app.state.broker = broker
    app.state.metrics = metrics

    # The browser UI is served from another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(router)
    return app


async def run(config: ServiceConfiguration) -> int:
    """Connect, start the pipeline and serve HTTP until shutdown.

    Returns:
        Process exit status
    """
    logger.info(f"Broker: {config.broker_url} ({config.broker_backend})")
    logger.info(f"API Port: {config.api_port}")
    logger.info(f"Log Level: {config.log_level}")

    metrics = InfrastructureFactory.create_metrics()
    broker = InfrastructureFactory.create_broker(config, metrics=metrics)

    try:
        await broker.connect()
    except BrokerConnectionException as e:
        logger.error(f"Failed to start: {e.message}")
        return 1

    try:
        order_service = InfrastructureFactory.create_order_service(
            config,
            broker=broker,
            order_repository=InfrastructureFactory.create_order_repository(),
            metrics=metrics,
        )
        await order_service.start()

        app = create_app(order_service, broker, metrics)
        server = uvicorn.Server(
            uvicorn.Config(
                app,
                host=config.api_host,
                port=config.api_port,
                log_level=config.log_level.lower(),
            )
        )
        logger.info(f"Server running on port {config.api_port}")
        await server.serve()
    finally:
        logger.info("Shutting down order pipeline")
        await broker.close()

    return 0


def main() -> None:
    """Console entry point."""
    setup_logging()
    try:
        config = InfrastructureFactory.create_configuration_port().load_configuration()
    except ConfigurationException as e:
        logger.error(e.message)
        sys.exit(1)

    setup_logging(config.log_level)
    sys.exit(asyncio.run(run(config)))


if __name__ == "__main__":
    main()
