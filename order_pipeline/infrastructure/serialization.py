"""Serialization utilities for queue messages.

Messages travel as UTF-8 JSON objects with camelCase field names.
"""

import json
from typing import Any

from pydantic import BaseModel

from ..domain.exceptions import SerializationException


def encode_message(message: BaseModel | dict[str, Any]) -> bytes:
    """Serialize a Pydantic model or a plain dict to UTF-8 JSON bytes."""
    try:
        if isinstance(message, BaseModel):
            return message.model_dump_json(by_alias=True).encode("utf-8")
        # default=str covers datetimes and enums in hand-built payloads
        return json.dumps(message, default=str).encode("utf-8")
    except Exception as e:
        raise SerializationException(f"Failed to serialize message: {e}") from e


def decode_message(data: bytes) -> dict[str, Any]:
    """Deserialize UTF-8 JSON bytes into a message dict."""
    if not data:
        raise SerializationException("Empty message body received")
    try:
        decoded = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SerializationException(f"Invalid JSON message: {e}") from e
    if not isinstance(decoded, dict):
        raise SerializationException(
            f"Expected a JSON object, got {type(decoded).__name__}"
        )
    return decoded
