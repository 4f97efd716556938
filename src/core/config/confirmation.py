"""Email confirmation settings.

Token lifetime and per-identity throttling for the confirmation gate. The
attempt threshold is deliberately a configuration value: pick the production
limit per deployment instead of relying on a constant in code.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class ConfirmationSettings(BaseSettings):
    """Defines settings for confirmation token issuance and rate limiting.

    Security Note:
        - Keep EMAIL_CONFIRMATION_RATE_LIMIT_MAX_ATTEMPTS low (single digits) in
          production; the window bounds how many confirmation emails a single
          address can trigger.
        - EMAIL_CONFIRMATION_DEV_TOOLS_ENABLED exposes rate-limit reset and
          statistics endpoints and is ignored when APP_ENV is "production".
    """

    EMAIL_CONFIRMATION_TOKEN_TTL_HOURS: int = Field(default=24, gt=0)
    EMAIL_CONFIRMATION_RATE_LIMIT_WINDOW_SECONDS: int = Field(default=3600, gt=0)
    EMAIL_CONFIRMATION_RATE_LIMIT_MAX_ATTEMPTS: int = Field(default=5, gt=0)

    EMAIL_CONFIRMATION_BASE_URL: str = "http://localhost:8000"
    EMAIL_CONFIRMATION_DEV_TOOLS_ENABLED: bool = False
