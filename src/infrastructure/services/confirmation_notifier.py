"""Infrastructure implementation of the confirmation notifier.

Builds the confirmation link for a secret and hands the message off. Actual
mail transport is owned by the delivery provider and is outside this service:
the notifier logs the hand-off, with the full link only in test mode.
"""

from urllib.parse import urlencode

import structlog

from src.core.exceptions import NotifierError
from src.domain.interfaces.email_confirmation import INotifier
from src.domain.value_objects.email import mask_identity
from src.utils.i18n import get_translated_message

logger = structlog.get_logger(__name__)

CONFIRM_EMAIL_PATH = "/api/v1/confirm-email"


class LoggingConfirmationNotifier(INotifier):
    """Notifier that records confirmation messages in the structured log.

    Features:
    - Confirmation link built from the configured base URL
    - I18N support for the failure message
    - Test mode support (full link logged for local flows)
    """

    def __init__(self, base_url: str, test_mode: bool = False):
        """Initialize the notifier.

        Args:
            base_url: Public origin the confirmation link points at
            test_mode: Log the full confirmation link instead of its prefix
        """
        self._base_url = base_url.rstrip("/")
        self._test_mode = test_mode

        logger.info("LoggingConfirmationNotifier initialized", test_mode=test_mode)

    def build_confirmation_url(self, secret: str) -> str:
        return f"{self._base_url}{CONFIRM_EMAIL_PATH}?{urlencode({'token': secret})}"

    async def send_confirmation(self, identity: str, secret: str, language: str = "en") -> None:
        """Hand a confirmation message off for delivery.

        Raises:
            NotifierError: If the message cannot be built
        """
        if not identity or not secret:
            logger.error(
                "Failed to send confirmation email",
                identity=mask_identity(identity or ""),
                error="missing identity or secret",
            )
            raise NotifierError(get_translated_message("confirmation_email_send_failed", language))

        confirmation_url = self.build_confirmation_url(secret)
        if self._test_mode:
            logger.info(
                "Confirmation email (test mode)",
                identity=mask_identity(identity),
                confirmation_url=confirmation_url,
                language=language,
            )
        else:
            logger.info(
                "Confirmation email handed off",
                identity=mask_identity(identity),
                token_prefix=secret[:8],
                language=language,
            )
