"""Configuration objects for the infrastructure layer."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain.constants import BrokerDefaults
from ..domain.models import ServiceConfiguration


class BrokerConnectionConfig(BaseModel):
    """Strongly-typed configuration for broker connections.

    Encapsulates the connection and retry settings handed to a broker
    adapter at construction time.
    """

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        strict=True,
        validate_assignment=True,
    )

    url: str = Field(
        default=BrokerDefaults.URL,
        description="Broker server URL",
    )
    max_connect_attempts: int = Field(
        default=BrokerDefaults.MAX_CONNECT_ATTEMPTS,
        ge=1,
        description="Connection attempts before startup fails",
    )
    retry_interval: float = Field(
        default=BrokerDefaults.RETRY_INTERVAL_SECONDS,
        ge=0,
        description="Fixed wait between connection attempts in seconds",
    )
    connect_timeout: float = Field(
        default=2.0,
        gt=0,
        description="Timeout of a single connection attempt in seconds",
    )
    max_reconnect_attempts: int = Field(
        default=10,
        ge=1,
        description="Reconnection attempts after an established connection drops",
    )
    reconnect_time_wait: float = Field(
        default=2.0,
        gt=0,
        description="Time to wait between reconnection attempts in seconds",
    )
    dead_letter_queue: str | None = Field(
        default=None,
        description="Queue receiving messages whose handler failed; None drops them",
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate server URL format."""
        if not v.startswith(("nats://", "tls://", "ws://", "wss://", "memory://")):
            raise ValueError(
                f"Invalid broker URL: {v}. "
                "Must start with nats://, tls://, ws://, wss:// or memory://"
            )
        return v

    @classmethod
    def from_service_configuration(cls, config: ServiceConfiguration) -> BrokerConnectionConfig:
        """Derive broker settings from the service configuration."""
        return cls(
            url=config.broker_url,
            max_connect_attempts=config.connect_max_attempts,
            retry_interval=config.connect_retry_interval,
            dead_letter_queue=config.dead_letter_queue,
        )

    def to_connection_params(self) -> dict[str, Any]:
        """Convert to parameters for NATS connection.

        ``allow_reconnect`` is off so that ``nats.connect`` makes exactly one
        attempt; the adapter runs its own startup retry loop and turns client
        reconnect on once the first connection is established.
        """
        return {
            "servers": [self.url],
            "connect_timeout": self.connect_timeout,
            "allow_reconnect": False,
            "max_reconnect_attempts": self.max_reconnect_attempts,
            "reconnect_time_wait": self.reconnect_time_wait,
        }


class LogContext(BaseModel):
    """Strongly-typed context for structured logging."""

    model_config = ConfigDict(
        extra="allow",
        str_strip_whitespace=True,
        strict=False,
        validate_assignment=True,
    )

    queue: str | None = Field(default=None, description="Queue being published or consumed")
    operation: str | None = Field(default=None, description="Current operation")
    component: str | None = Field(default=None, description="Component emitting the log")
    attempt: int | None = Field(default=None, ge=1, description="Connection attempt number")
    error_type: str | None = Field(default=None, description="Type of error encountered")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging frameworks."""
        return {k: v for k, v in self.model_dump().items() if v is not None}

    def with_error(self, error: Exception) -> LogContext:
        """Create a new context with error information."""
        return LogContext(**{**self.model_dump(), "error_type": type(error).__name__})
