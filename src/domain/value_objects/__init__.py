"""Domain Value Objects for the email confirmation domain.

Value objects are immutable objects that describe domain concepts by their attributes
rather than their identity.
"""

from .confirmation_result import (
    ConfirmationStats,
    SweepResult,
    TokenRequestResult,
    TokenVerificationResult,
)
from .confirmation_token import ConfirmationToken
from .email import Email, mask_identity, validate_identity
from .rate_limit import RateLimitDecision, RateLimitWindow

__all__ = [
    "ConfirmationStats",
    "ConfirmationToken",
    "Email",
    "RateLimitDecision",
    "RateLimitWindow",
    "SweepResult",
    "TokenRequestResult",
    "TokenVerificationResult",
    "mask_identity",
    "validate_identity",
]
