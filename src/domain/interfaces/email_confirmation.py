"""Email confirmation service and notifier interfaces."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.domain.value_objects.confirmation_result import (
    ConfirmationStats,
    SweepResult,
    TokenRequestResult,
    TokenVerificationResult,
)


class IEmailConfirmationService(ABC):
    """Interface for the confirmation gate.

    Implementations decide whether a confirmation token may be issued for an
    identity and resolve presented secrets exactly once. All methods are
    synchronous and bounded; none performs I/O.
    """

    @abstractmethod
    def request_token(self, raw_email: str, language: str = "en") -> TokenRequestResult:
        """Issue a confirmation token for an email address.

        Args:
            raw_email: Untrusted email address
            language: Language code for the failure message

        Returns:
            TokenRequestResult: The secret, or a generic / wait-time failure
        """
        pass

    @abstractmethod
    def verify_token(self, secret: str, language: str = "en") -> TokenVerificationResult:
        """Resolve and consume a confirmation secret.

        Args:
            secret: Secret delivered to the user
            language: Language code for the failure message

        Returns:
            TokenVerificationResult: The bound identity, or a failure
        """
        pass

    @abstractmethod
    def has_pending_token(self, raw_email: str) -> bool:
        """Check whether an unexpired token exists for an email address."""
        pass

    @abstractmethod
    def sweep_expired(self, now: Optional[datetime] = None) -> SweepResult:
        """Evict expired tokens and stale rate limit windows."""
        pass

    @abstractmethod
    def get_stats(self) -> ConfirmationStats:
        """Return counts of stored records for monitoring."""
        pass

    @abstractmethod
    def reset_rate_limits(self) -> int:
        """Drop every rate limit window. Returns the number dropped."""
        pass


class INotifier(ABC):
    """Interface for delivering confirmation secrets out of band.

    Implementations own formatting, transport and any retry policy. They are
    called after the secret has left the confirmation stores, so a failure
    here never affects the issued token.
    """

    @abstractmethod
    async def send_confirmation(self, identity: str, secret: str, language: str = "en") -> None:
        """Deliver a confirmation message.

        Args:
            identity: Normalized email address to deliver to
            secret: Confirmation secret to embed in the message
            language: Language code for the message

        Raises:
            NotifierError: If the message could not be handed off
        """
        pass
