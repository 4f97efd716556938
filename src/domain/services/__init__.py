"""Domain Services for the email confirmation bounded context.

- Email Confirmation: token issuance, verification and maintenance sweeps
- Token Store: one-time confirmation token storage
"""

from .email_confirmation.email_confirmation_service import EmailConfirmationService
from .email_confirmation.token_store import ConfirmationTokenStore

__all__ = [
    "EmailConfirmationService",
    "ConfirmationTokenStore",
]
