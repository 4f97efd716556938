"""In-memory store for one-time email confirmation tokens.

Tokens are keyed by their secret. A secret leaves the store the first time it
is presented (successfully or expired) or when a sweep finds it past its
expiry, and is never handed out again.
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict

import structlog

from src.core.exceptions import TokenExpiredError, TokenNotFoundError
from src.domain.value_objects.confirmation_token import ConfirmationToken
from src.domain.value_objects.email import mask_identity

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TokenStoreStats:
    """Point-in-time counts for monitoring."""

    total_tokens: int
    expired_tokens: int


class ConfirmationTokenStore:
    """Thread-safe map of live confirmation tokens.

    Every access goes through one lock. No method performs I/O, so the lock is
    only ever held for a dictionary operation or a linear scan.
    """

    def __init__(self, ttl: timedelta = timedelta(hours=24)):
        if ttl.total_seconds() <= 0:
            raise ValueError("Token ttl must be positive")
        self.ttl = ttl
        self._tokens: Dict[str, ConfirmationToken] = {}
        self._lock = threading.Lock()

    def mint(self, identity: str, now: datetime) -> str:
        """Issue a new token for `identity` and return its secret.

        Args:
            identity: Normalized identity the token proves.
            now: Current time from the shared clock.

        Returns:
            str: The secret; delivering it out of band is the caller's job.
        """
        with self._lock:
            secret = ConfirmationToken.generate_secret()
            while secret in self._tokens:
                secret = ConfirmationToken.generate_secret()
            token = ConfirmationToken.issue(identity, secret, now, self.ttl)
            self._tokens[secret] = token

        logger.info(
            "Confirmation token issued",
            identity=mask_identity(identity),
            token_prefix=secret[:8],
            expires_at=token.expires_at.isoformat(),
        )
        return secret

    def consume(self, secret: str, now: datetime) -> str:
        """Resolve and invalidate a token.

        The token is removed whether it verifies or has expired.

        Args:
            secret: Secret presented by the user.
            now: Current time from the shared clock.

        Returns:
            str: The identity bound to the token.

        Raises:
            TokenNotFoundError: No live token has this secret.
            TokenExpiredError: The token had expired; it has now been evicted.
        """
        with self._lock:
            token = self._tokens.pop(secret, None) if isinstance(secret, str) else None

        if token is None:
            raise TokenNotFoundError()
        if token.is_expired(now):
            raise TokenExpiredError()
        return token.identity

    def has_pending(self, identity: str, now: datetime) -> bool:
        """Return True if any unexpired token is bound to `identity`.

        Read-only; reveals neither how many tokens exist nor which.
        """
        with self._lock:
            return any(
                token.identity == identity and not token.is_expired(now)
                for token in self._tokens.values()
            )

    def sweep(self, now: datetime) -> int:
        """Evict every token past its expiry.

        Returns:
            int: Number of tokens evicted.
        """
        with self._lock:
            expired = [secret for secret, token in self._tokens.items() if token.is_expired(now)]
            for secret in expired:
                del self._tokens[secret]
        return len(expired)

    def stats(self, now: datetime) -> TokenStoreStats:
        with self._lock:
            total = len(self._tokens)
            expired = sum(1 for token in self._tokens.values() if token.is_expired(now))
        return TokenStoreStats(total_tokens=total, expired_tokens=expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)
