"""Email Confirmation Domain Service.

This service is the confirmation gate for account activation. It composes
identity validation, per-identity rate limiting and the one-time token store
into the operations used by the registration flow.

Per identity, the observable states are::

    NoToken -> Pending (request_token) -> Consumed | Expired (verify_token)

Pending may re-enter Pending: a new request mints an additional token and
leaves earlier ones alone. Callers that want a single live token check
`has_pending_token` first.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import structlog

from src.core.exceptions import (
    InvalidIdentityError,
    RateLimitExceededError,
    TokenExpiredError,
    TokenNotFoundError,
)
from src.domain.interfaces.email_confirmation import IEmailConfirmationService
from src.domain.rate_limiting.services import FixedWindowRateLimiter
from src.domain.services.email_confirmation.token_store import ConfirmationTokenStore
from src.domain.value_objects.confirmation_result import (
    ConfirmationStats,
    SweepResult,
    TokenRequestResult,
    TokenVerificationResult,
)
from src.domain.value_objects.email import mask_identity, validate_identity
from src.utils.i18n import get_translated_message

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EmailConfirmationService(IEmailConfirmationService):
    """Domain service for confirmation token issuance and verification.

    Responsibilities:
    - Validate and normalize identities
    - Throttle confirmation requests per identity
    - Issue one-time tokens and resolve them exactly once
    - Opportunistically sweep expired records

    Security Features:
    - Every identity failure maps to one generic message (no enumeration)
    - Only the wait time leaks on rate limiting
    - Secrets are logged by prefix only and identities masked

    One instance is built at application start and shared by all request
    handlers; the stores it owns carry their own locks.
    """

    def __init__(
        self,
        token_store: ConfirmationTokenStore,
        rate_limiter: FixedWindowRateLimiter,
        clock: Optional[Clock] = None,
    ):
        """Initialize the service with its stores.

        Args:
            token_store: Store of live confirmation tokens
            rate_limiter: Per-identity request throttle
            clock: Returns the current timezone-aware time; defaults to UTC now
        """
        self._token_store = token_store
        self._rate_limiter = rate_limiter
        self._clock = clock or utc_now

        logger.info("EmailConfirmationService initialized")

    @classmethod
    def from_settings(cls, settings, clock: Optional[Clock] = None) -> "EmailConfirmationService":
        """Build a service with stores sized from application settings."""
        token_store = ConfirmationTokenStore(
            ttl=timedelta(hours=settings.EMAIL_CONFIRMATION_TOKEN_TTL_HOURS)
        )
        rate_limiter = FixedWindowRateLimiter(
            limit=settings.EMAIL_CONFIRMATION_RATE_LIMIT_MAX_ATTEMPTS,
            window_size=timedelta(seconds=settings.EMAIL_CONFIRMATION_RATE_LIMIT_WINDOW_SECONDS),
        )
        return cls(token_store, rate_limiter, clock=clock)

    @property
    def token_store(self) -> ConfirmationTokenStore:
        return self._token_store

    @property
    def rate_limiter(self) -> FixedWindowRateLimiter:
        return self._rate_limiter

    def request_token(self, raw_email: str, language: str = "en") -> TokenRequestResult:
        """Issue a confirmation token for an email address.

        Args:
            raw_email: Untrusted email address
            language: Language code for failure messages

        Returns:
            TokenRequestResult: ``ok`` with the secret, or a failure whose
            message is generic for identity errors and carries the wait time
            for rate limiting. The secret must go to the notifier, never back
            to an unauthenticated client.
        """
        now = self._clock()
        self.sweep_expired(now)

        try:
            identity = validate_identity(raw_email)
        except InvalidIdentityError as e:
            logger.warning(
                "Confirmation request rejected",
                error=e.code,
                reason=e.reason,
            )
            return TokenRequestResult.rejected(
                get_translated_message("invalid_identity_generic", language), e.code
            )

        decision = self._rate_limiter.check_and_record(identity, now)
        if decision.is_blocked:
            error = RateLimitExceededError(
                decision.wait_seconds,
                message=get_translated_message("confirmation_rate_limited", language).format(
                    wait_seconds=decision.wait_seconds
                ),
            )
            return TokenRequestResult.rejected(
                error.message, error.code, wait_seconds=error.wait_seconds
            )

        secret = self._token_store.mint(identity, now)
        return TokenRequestResult.issued(secret, identity)

    def verify_token(self, secret: str, language: str = "en") -> TokenVerificationResult:
        """Resolve and consume a confirmation secret.

        Not-found and expired secrets are reported differently: a secret is
        already a high-entropy proof of possession, so distinguishing them
        reveals nothing about which identities exist.
        """
        now = self._clock()
        try:
            identity = self._token_store.consume(secret, now)
        except TokenExpiredError as e:
            logger.info(
                "Confirmation token expired",
                token_prefix=secret[:8],
                error=e.code,
            )
            return TokenVerificationResult.rejected(
                get_translated_message("confirmation_token_expired", language), e.code
            )
        except TokenNotFoundError as e:
            logger.warning(
                "Confirmation token not found",
                token_prefix=secret[:8] if isinstance(secret, str) else "none",
                error=e.code,
            )
            return TokenVerificationResult.rejected(
                get_translated_message("confirmation_token_not_found", language), e.code
            )

        logger.info(
            "Email confirmation completed successfully",
            identity=mask_identity(identity),
            token_prefix=secret[:8],
        )
        return TokenVerificationResult.confirmed(identity)

    def has_pending_token(self, raw_email: str) -> bool:
        """Check whether an unexpired token exists for an email address.

        Invalid addresses simply have no pending token.
        """
        try:
            identity = validate_identity(raw_email)
        except InvalidIdentityError:
            return False
        return self._token_store.has_pending(identity, self._clock())

    def sweep_expired(self, now: Optional[datetime] = None) -> SweepResult:
        """Evict tokens past their expiry and windows idle past two window sizes.

        Idempotent: a second sweep at the same time evicts nothing.
        """
        now = now or self._clock()
        result = SweepResult(
            tokens_evicted=self._token_store.sweep(now),
            windows_evicted=self._rate_limiter.sweep(now),
        )
        if result.total:
            logger.info(
                "Confirmation sweep completed",
                tokens_evicted=result.tokens_evicted,
                windows_evicted=result.windows_evicted,
            )
        return result

    def get_stats(self) -> ConfirmationStats:
        token_stats = self._token_store.stats(self._clock())
        return ConfirmationStats(
            total_tokens=token_stats.total_tokens,
            expired_tokens=token_stats.expired_tokens,
            tracked_windows=len(self._rate_limiter),
        )

    def reset_rate_limits(self) -> int:
        return self._rate_limiter.reset()
