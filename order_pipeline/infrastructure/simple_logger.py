"""Simple logger implementation backed by the standard logging module."""

import logging
from typing import Any

from ..ports.logger import LoggerPort


class SimpleLogger(LoggerPort):
    """Logger adapter using Python's standard logging.

    Keyword arguments are attached to the record as ``extra`` fields so that
    structured formatters can pick them up.
    """

    def __init__(self, name: str = "order_pipeline", level: int | None = None):
        """Initialize the logger.

        Args:
            name: Logger name (default: "order_pipeline")
            level: Optional level override; inherits the root level when omitted
        """
        self._logger = logging.getLogger(name)
        if level is not None:
            self._logger.setLevel(level)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        self._logger.debug(message, extra=kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""
        self._logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""
        self._logger.warning(message, extra=kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error message."""
        self._logger.error(message, extra=kwargs)

    def exception(self, message: str, exc_info: Exception | None = None, **kwargs: Any) -> None:
        """Log an exception with traceback."""
        self._logger.exception(message, exc_info=exc_info or True, extra=kwargs)
