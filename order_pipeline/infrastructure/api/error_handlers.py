"""Centralized error handling for the API layer.

This module provides consistent error handling across all API endpoints,
mapping domain exceptions to appropriate HTTP responses.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...domain.exceptions import (
    BrokerConnectionException,
    BrokerNotConnectedException,
    ConfigurationException,
    DomainException,
    InvalidStatusTransitionException,
    OrderNotFoundException,
    OrderValidationException,
    SerializationException,
)

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Standard error response model."""

    model_config = ConfigDict(strict=True, frozen=True)

    error: str = Field(..., description="Human-readable error message")
    code: str | None = Field(None, description="Error code")


# Mapping of domain exception types to HTTP status codes
EXCEPTION_STATUS_MAP = {
    OrderValidationException: status.HTTP_400_BAD_REQUEST,
    OrderNotFoundException: status.HTTP_404_NOT_FOUND,
    InvalidStatusTransitionException: status.HTTP_409_CONFLICT,
    BrokerConnectionException: status.HTTP_503_SERVICE_UNAVAILABLE,
    BrokerNotConnectedException: status.HTTP_503_SERVICE_UNAVAILABLE,
    SerializationException: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationException: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Request body fields and the message reported when they fail to parse
FIELD_ERROR_MESSAGES = {
    "product": "Product is required",
    "quantity": "Quantity must be greater than 0",
    "email": "Invalid email",
}


def create_error_response(
    message: str,
    status_code: int,
    code: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Create a standardized error response.

    Args:
        message: Error message shown to the caller
        status_code: HTTP status code
        code: Optional machine-readable error code
        headers: Optional response headers, such as ``Allow`` on a 405

    Returns:
        JSONResponse with error information
    """
    error_response = ErrorResponse(error=message, code=code)
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(exclude_none=True),
        headers=headers,
    )


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Handle domain-specific exceptions.

    Args:
        request: The request that caused the exception
        exc: The domain exception

    Returns:
        JSONResponse with appropriate status code and error details
    """
    logger.warning(
        f"Domain exception on {request.method} {request.url.path}: "
        f"{exc.message} (code: {exc.error_code})"
    )

    status_code = EXCEPTION_STATUS_MAP.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return create_error_response(exc.message, status_code, exc.error_code)


def _validation_message(exc: RequestValidationError) -> str:
    """Pick the message for the first field that failed to parse."""
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        for field, message in FIELD_ERROR_MESSAGES.items():
            if field in loc:
                return message
    return "Invalid request body"


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle malformed request bodies as validation failures.

    Args:
        request: The request that caused the exception
        exc: The validation exception

    Returns:
        JSONResponse with status 400
    """
    logger.warning(
        f"Validation error on {request.method} {request.url.path}: {len(exc.errors())} errors"
    )
    return create_error_response(
        _validation_message(exc), status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR"
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions, including router 404/405, with consistent format."""
    logger.info(
        f"HTTP exception on {request.method} {request.url.path}: {exc.status_code} - {exc.detail}"
    )
    return create_error_response(str(exc.detail), exc.status_code, headers=exc.headers)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions.

    Args:
        request: The request that caused the exception
        exc: The unexpected exception

    Returns:
        JSONResponse with generic error message
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}",
        exc_info=exc,
    )
    return create_error_response("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
