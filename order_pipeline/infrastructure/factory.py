"""Infrastructure factory for creating adapters and dependencies.

This module follows the Factory pattern to centralize the creation of
infrastructure components, promoting loose coupling and testability.
"""

from __future__ import annotations

from ..application.order_service import OrderService
from ..domain.models import ServiceConfiguration
from ..ports.configuration import ConfigurationPort
from ..ports.logger import LoggerPort
from ..ports.message_broker import MessageBrokerPort
from ..ports.metrics import MetricsPort
from ..ports.order_repository import OrderRepositoryPort
from .config import BrokerConnectionConfig
from .configuration_adapter import EnvironmentConfigurationAdapter
from .in_memory_broker import InMemoryBrokerAdapter
from .in_memory_metrics import InMemoryMetrics
from .in_memory_order_repository import InMemoryOrderRepository
from .nats_broker import NATSBrokerAdapter
from .simple_logger import SimpleLogger


class InfrastructureFactory:
    """Factory for creating infrastructure adapters following hexagonal architecture.

    This factory encapsulates the creation logic for all infrastructure components,
    making it easy to swap implementations and configure dependencies.
    """

    @staticmethod
    def create_configuration_port() -> ConfigurationPort:
        """Create a configuration port adapter.

        Returns:
            ConfigurationPort implementation
        """
        return EnvironmentConfigurationAdapter()

    @staticmethod
    def create_metrics() -> MetricsPort:
        return InMemoryMetrics()

    @staticmethod
    def create_broker(
        config: ServiceConfiguration,
        logger: LoggerPort | None = None,
        metrics: MetricsPort | None = None,
    ) -> MessageBrokerPort:
        """Create the broker adapter selected by ``config.broker_backend``.

        Args:
            config: Service configuration
            logger: Optional logger port
            metrics: Optional metrics port

        Returns:
            MessageBrokerPort implementation (not yet connected)
        """
        broker_config = BrokerConnectionConfig.from_service_configuration(config)
        logger = logger or SimpleLogger("order_pipeline.broker")
        if config.broker_backend == "memory":
            return InMemoryBrokerAdapter(config=broker_config, logger=logger, metrics=metrics)
        return NATSBrokerAdapter(config=broker_config, logger=logger, metrics=metrics)

    @staticmethod
    def create_order_repository() -> OrderRepositoryPort:
        """Create the order store."""
        return InMemoryOrderRepository()

    @staticmethod
    def create_order_service(
        config: ServiceConfiguration,
        broker: MessageBrokerPort,
        order_repository: OrderRepositoryPort,
        metrics: MetricsPort,
        logger: LoggerPort | None = None,
    ) -> OrderService:
        """Create the pipeline service wired to the given adapters.

        Args:
            config: Service configuration supplying the simulated stage delays
            broker: Connected broker
            order_repository: Order store shared by every stage
            metrics: Metrics port
            logger: Optional logger port

        Returns:
            OrderService instance
        """
        return OrderService(
            broker=broker,
            order_repository=order_repository,
            logger=logger or SimpleLogger("order_pipeline.service"),
            metrics=metrics,
            processing_delay=config.processing_delay,
            notification_delay=config.notification_delay,
        )
