from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

This module contains centralized handlers for custom application exceptions,
translating them into appropriate HTTP responses.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from src.core.exceptions import (
    ConfirmationGateError,
    EmailConfirmationError,
    InvalidIdentityError,
    NotifierError,
    RateLimitError,
    RateLimitExceededError,
)

__all__ = [
    "invalid_identity_error_handler",
    "rate_limit_exceeded_error_handler",
    "rate_limit_error_handler",
    "email_confirmation_error_handler",
    "notifier_error_handler",
    "confirmation_gate_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)


def _client_host(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def invalid_identity_error_handler(request: Request, exc: InvalidIdentityError) -> JSONResponse:
    """Handles `InvalidIdentityError`, returning a `400 Bad Request`.

    The body carries the generic message only; the failing rule is logged.

    Args:
        request: The incoming `Request` object.
        exc: The `InvalidIdentityError` instance.

    Returns:
        A `JSONResponse` with a 400 status code and error detail.
    """
    logger.warning(
        "Invalid identity",
        error=exc.code,
        reason=exc.reason,
        client_ip=_client_host(request),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message, "code": exc.code},
    )


async def rate_limit_exceeded_error_handler(request: Request, exc: RateLimitExceededError) -> JSONResponse:
    """Handles `RateLimitExceededError`, returning a `429` with `Retry-After`.

    Args:
        request: The incoming `Request` object.
        exc: The `RateLimitExceededError` instance.

    Returns:
        A `JSONResponse` with a 429 status code and error detail.
    """
    logger.warning(
        "domain_rate_limit_exceeded",
        client_ip=_client_host(request),
        path=request.url.path,
        wait_seconds=exc.wait_seconds,
    )
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": exc.message, "code": exc.code, "wait_seconds": exc.wait_seconds},
        headers={"Retry-After": str(exc.wait_seconds)},
    )


async def rate_limit_error_handler(request: Request, exc: RateLimitError) -> JSONResponse:
    """Handles other `RateLimitError`s, such as a confirmation already in flight."""
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": exc.message, "code": exc.code},
    )


async def email_confirmation_error_handler(request: Request, exc: EmailConfirmationError) -> JSONResponse:
    """Handles `EmailConfirmationError` (not found / expired), returning a `400`.

    Args:
        request: The incoming `Request` object.
        exc: The `EmailConfirmationError` instance.

    Returns:
        A `JSONResponse` with a 400 status code and error detail.
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message, "code": exc.code},
    )


async def notifier_error_handler(request: Request, exc: NotifierError) -> JSONResponse:
    """Handles `NotifierError`, returning a `503 Service Unavailable`.

    Args:
        request: The incoming `Request` object.
        exc: The `NotifierError` instance.

    Returns:
        A `JSONResponse` with a 503 status code and error detail.
    """
    logger.error("Notifier failure", error=exc.code, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": exc.message, "code": exc.code},
    )


async def confirmation_gate_error_handler(request: Request, exc: ConfirmationGateError) -> JSONResponse:
    """Handles any other `ConfirmationGateError`, returning a `400 Bad Request`."""
    logger.warning("Unhandled application error", error=exc.code, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message, "code": exc.code},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all custom exception handlers with the FastAPI application.

    More specific exceptions are registered before the base class.

    Args:
        app: The `FastAPI` application instance.
    """
    app.add_exception_handler(InvalidIdentityError, invalid_identity_error_handler)
    app.add_exception_handler(RateLimitExceededError, rate_limit_exceeded_error_handler)
    app.add_exception_handler(RateLimitError, rate_limit_error_handler)
    app.add_exception_handler(EmailConfirmationError, email_confirmation_error_handler)
    app.add_exception_handler(NotifierError, notifier_error_handler)
    app.add_exception_handler(ConfirmationGateError, confirmation_gate_error_handler)
