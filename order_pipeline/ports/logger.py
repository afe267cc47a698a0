"""Logger port used by the pipeline service and the broker adapters."""

from abc import ABC, abstractmethod
from typing import Any


class LoggerPort(ABC):
    """Structured logging seen from the application side.

    Keyword arguments carry context such as ``order_id`` or ``queue``;
    adapters decide how to attach them to the emitted record.
    """

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        """Per-message broker chatter (publishes, declarations)."""

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        """Stage progress: order created, processed, notified."""

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        """Recoverable conditions such as a connection retry or a missing order."""

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        """Failures that are not tied to a raised exception."""

    @abstractmethod
    def exception(self, message: str, exc_info: Exception | None = None, **kwargs: Any) -> None:
        """A handler failure, logged with its traceback."""
