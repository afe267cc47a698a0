"""Ports layer - Interfaces for external communication."""

from .configuration import ConfigurationPort
from .logger import LoggerPort
from .message_broker import MessageBrokerPort, MessageHandler
from .metrics import MetricsPort
from .order_repository import OrderMutator, OrderRepositoryPort

__all__ = [
    "ConfigurationPort",
    "LoggerPort",
    "MessageBrokerPort",
    "MessageHandler",
    "MetricsPort",
    "OrderMutator",
    "OrderRepositoryPort",
]
