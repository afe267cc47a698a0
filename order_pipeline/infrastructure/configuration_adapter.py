"""Configuration adapter implementation.

Concrete implementation of the ConfigurationPort interface.
Loads configuration from environment variables.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import ValidationError

from ..domain.constants import BrokerDefaults, StageDefaults
from ..domain.exceptions import ConfigurationException
from ..domain.models import ServiceConfiguration
from ..ports.configuration import ConfigurationPort


class EnvironmentConfigurationAdapter(ConfigurationPort):
    """Adapter that loads configuration from environment variables."""

    def __init__(self, environ: Mapping[str, str] | None = None):
        """Initialize the adapter.

        Args:
            environ: Variables to read; defaults to ``os.environ``
        """
        self._environ = os.environ if environ is None else environ

    def _get(self, name: str, default: str | None = None) -> str | None:
        value = self._environ.get(name)
        if value is None or not value.strip():
            return default
        return value.strip()

    def load_configuration(self) -> ServiceConfiguration:
        """Load service configuration from environment variables.

        Returns:
            ServiceConfiguration: Validated configuration

        Raises:
            ConfigurationException: If configuration is invalid
        """
        try:
            broker_backend = self._get("BROKER_BACKEND", "nats").lower()
            default_url = "memory://local" if broker_backend == "memory" else BrokerDefaults.URL
            broker_url = self._get("BROKER_URL") or self._get("NATS_URL", default_url)
            dead_letter_queue = self._get("DEAD_LETTER_QUEUE")

            return ServiceConfiguration(
                broker_url=broker_url,
                broker_backend=broker_backend,
                api_host=self._get("API_HOST", "0.0.0.0"),  # nosec B104
                api_port=int(self._get("PORT", "3001")),
                log_level=self._get("LOG_LEVEL", "INFO").upper(),
                connect_max_attempts=int(
                    self._get("BROKER_CONNECT_ATTEMPTS", str(BrokerDefaults.MAX_CONNECT_ATTEMPTS))
                ),
                connect_retry_interval=float(
                    self._get("BROKER_RETRY_INTERVAL", str(BrokerDefaults.RETRY_INTERVAL_SECONDS))
                ),
                processing_delay=float(
                    self._get("PROCESSING_DELAY", str(StageDefaults.PROCESSING_DELAY))
                ),
                notification_delay=float(
                    self._get("NOTIFICATION_DELAY", str(StageDefaults.NOTIFICATION_DELAY))
                ),
                dead_letter_queue=dead_letter_queue,
            )
        except (ValidationError, ValueError) as e:
            raise ConfigurationException(f"Failed to load configuration: {e}") from e
