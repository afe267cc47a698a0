"""
Centralized logging configuration for the order pipeline.
Prevents duplicate logs and controls verbosity.
"""

import logging
import os
import sys


def setup_logging(log_level: str | None = None) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level (INFO, WARNING, ERROR, DEBUG)
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO")
    log_level = log_level.upper()

    # Clear any existing handlers
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(name)s] %(levelname)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )
    )
    root.setLevel(log_level)
    root.addHandler(handler)

    if log_level != "DEBUG":
        # Client library chatter
        logging.getLogger("nats").setLevel(logging.WARNING)
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.getLogger("order_pipeline").setLevel(log_level)
