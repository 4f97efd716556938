from __future__ import annotations

"""Centralized, structured exception hierarchy for the confirmation gate.

This module defines the exceptions raised by the confirmation core. They carry
a machine-readable `code` for programmatic error handling and a human-readable
`message` for logging and user feedback.

The hierarchy is designed to:
- Provide clear, specific errors for different failure scenarios.
- Support internationalization (i18n) for user-facing messages.
- Map cleanly to HTTP status codes in the API layer.
- Keep the internal failure kind available for logging even where the
  user-facing message is collapsed to a generic one.
"""

from typing import Final, Optional

from src.utils.i18n import get_translated_message

__all__: Final = [
    "ConfirmationGateError",
    "ValidationError",
    "InvalidIdentityError",
    "RateLimitError",
    "RateLimitExceededError",
    "EmailConfirmationError",
    "TokenNotFoundError",
    "TokenExpiredError",
    "NotifierError",
]


class ConfirmationGateError(Exception):
    """Base exception class for all custom errors in the application.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
                       This message can be translated.
        code (str): A unique, machine-readable error code for identifying
                    the type of error programmatically.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    # A concise, structured representation used by loggers & FastAPI handlers.
    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Validation errors (typically map to 400 Bad Request)
# ---------------------------------------------------------------------------


class ValidationError(ConfirmationGateError):
    """Raised for general data validation failures."""

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)


class InvalidIdentityError(ValidationError):
    """Raised when an identity (email address) is empty, oversized or malformed.

    The `reason` attribute records which rule failed, for logging only. The
    message shown to users is the same generic text for every reason so that
    responses cannot be used to probe which addresses are acceptable.
    """

    def __init__(
        self,
        reason: str = "malformed",
        message: Optional[str] = None,
        code: str = "invalid_identity",
    ):
        if message is None:
            message = get_translated_message("invalid_identity_generic", "en")
        self.reason = reason
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Operational errors (typically map to 429 Too Many Requests)
# ---------------------------------------------------------------------------


class RateLimitError(ConfirmationGateError):
    """Base class for rate limiting related errors."""

    def __init__(self, message: str | None = None, code: str = "rate_limit_exceeded"):
        if message is None:
            message = get_translated_message("rate_limit_exceeded", "en")
        super().__init__(message, code)


class RateLimitExceededError(RateLimitError):
    """Raised when an identity has exhausted its confirmation requests.

    Carries the number of whole seconds until the current window closes. This
    figure is safe to expose: it says nothing about whether the identity
    belongs to an account.
    """

    def __init__(
        self,
        wait_seconds: int,
        message: str | None = None,
        code: str = "rate_limited",
    ):
        self.wait_seconds = wait_seconds
        if message is None:
            message = get_translated_message("confirmation_rate_limited", "en").format(
                wait_seconds=wait_seconds
            )
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Confirmation token errors (typically map to 400 Bad Request)
# ---------------------------------------------------------------------------


class EmailConfirmationError(ConfirmationGateError):
    """Raised when email confirmation operations fail."""

    def __init__(self, message: str, code: str = "email_confirmation_error"):
        super().__init__(message, code)


class TokenNotFoundError(EmailConfirmationError):
    """Raised when a presented secret matches no live confirmation token."""

    def __init__(self, message: str | None = None, code: str = "token_not_found"):
        if message is None:
            message = get_translated_message("confirmation_token_not_found", "en")
        super().__init__(message, code)


class TokenExpiredError(EmailConfirmationError):
    """Raised when a presented secret matched a token past its expiry.

    The token is evicted before this is raised, so presenting the same
    secret again yields `TokenNotFoundError`.
    """

    def __init__(self, message: str | None = None, code: str = "token_expired"):
        if message is None:
            message = get_translated_message("confirmation_token_expired", "en")
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Collaborator errors (typically map to 503 Service Unavailable)
# ---------------------------------------------------------------------------


class NotifierError(ConfirmationGateError):
    """Raised when the notifier fails to hand a confirmation message off.

    A notifier failure never invalidates a token that was already minted.
    """

    def __init__(self, message: str | None = None, code: str = "notifier_error"):
        if message is None:
            message = get_translated_message("confirmation_email_send_failed", "en")
        super().__init__(message, code)
