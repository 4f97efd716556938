"""
Rate Limiting Domain Services

Fixed-window request throttling for confirmation requests, keyed by identity.

The fixed window is a deliberate simplification over a sliding log: a burst
straddling a window boundary can see up to ``2 x limit`` allowed requests.
Callers rely only on the allow/deny decision and the reported wait time, so a
sliding-window or token-bucket strategy could replace it behind the same
`check_and_record` contract.
"""

import threading
from datetime import datetime, timedelta
from typing import Dict, Optional

import structlog

from src.domain.value_objects.email import mask_identity
from src.domain.value_objects.rate_limit import RateLimitDecision, RateLimitWindow

logger = structlog.get_logger(__name__)


class FixedWindowRateLimiter:
    """
    Per-identity fixed-window rate limiter backed by an in-memory map.

    All reads and writes of the window map happen under a single lock; every
    operation is O(1) except `sweep`, which is O(n) in tracked identities.
    Denied checks never increment the attempt counter, so an exhausted window
    keeps reporting an accurate wait time no matter how often it is probed.
    """

    def __init__(self, limit: int, window_size: timedelta):
        """
        Args:
            limit (int): Allowed requests per identity per window.
            window_size (timedelta): Length of each fixed window.
        """
        if limit <= 0:
            raise ValueError("Rate limit must be positive")
        if window_size.total_seconds() <= 0:
            raise ValueError("Rate limit window size must be positive")

        self.limit = limit
        self.window_size = window_size
        self._windows: Dict[str, RateLimitWindow] = {}
        self._lock = threading.Lock()

        logger.info(
            "FixedWindowRateLimiter initialized",
            limit=limit,
            window_seconds=int(window_size.total_seconds()),
        )

    def check_and_record(self, identity: str, now: datetime) -> RateLimitDecision:
        """
        Decide whether `identity` may make another request and record it.

        Args:
            identity (str): Normalized identity.
            now (datetime): Current time from the shared clock.

        Returns:
            RateLimitDecision: Allowed, or denied with the seconds until the
                               current window closes.
        """
        with self._lock:
            window = self._windows.get(identity)

            if window is None or window.is_elapsed(now, self.window_size):
                window = RateLimitWindow.open(identity, now)
                self._windows[identity] = window
                return RateLimitDecision.allowed_result(identity, window.attempts)

            if window.is_exhausted(self.limit):
                self._windows[identity] = window.touch(now)
                wait_seconds = window.seconds_until_reset(now, self.window_size)
                decision = RateLimitDecision.denied_result(identity, window.attempts, wait_seconds)
            else:
                window = window.record_attempt(now)
                self._windows[identity] = window
                return RateLimitDecision.allowed_result(identity, window.attempts)

        logger.warning(
            "Confirmation rate limit exceeded",
            identity=mask_identity(identity),
            attempts=decision.attempts,
            limit=self.limit,
            wait_seconds=decision.wait_seconds,
        )
        return decision

    def get_window(self, identity: str) -> Optional[RateLimitWindow]:
        """Return the current window for `identity`, if one is tracked."""
        with self._lock:
            return self._windows.get(identity)

    def sweep(self, now: datetime) -> int:
        """
        Evict windows idle for more than twice the window size.

        Returns:
            int: Number of windows evicted.
        """
        with self._lock:
            stale = [
                identity
                for identity, window in self._windows.items()
                if window.is_stale(now, self.window_size)
            ]
            for identity in stale:
                del self._windows[identity]
        return len(stale)

    def reset(self) -> int:
        """
        Forget every tracked window.

        Returns:
            int: Number of windows dropped.
        """
        with self._lock:
            count = len(self._windows)
            self._windows.clear()
        logger.info("Confirmation rate limits reset", cleared=count)
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)
