"""Rate Limiting Value Objects for domain modeling.

These value objects encapsulate the fixed-window throttling rules for
confirmation requests and provide a clean abstraction over the decision the
rate limiter hands back to its caller.
"""

import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class RateLimitWindow:
    """Fixed rate limiting window for a single identity.

    Windows are immutable; every recorded attempt produces a new instance that
    replaces the previous one in the limiter's map.

    Attributes:
        identity: Normalized email the window applies to
        attempts: Allowed requests observed since `window_start`
        window_start: When the current window opened
        last_seen: Most recent request for this identity, allowed or denied
    """

    identity: str
    attempts: int
    window_start: datetime
    last_seen: datetime

    def __post_init__(self) -> None:
        """Validate window state."""
        if self.attempts <= 0:
            raise ValueError("Attempts must be positive")

        if not self.window_start.tzinfo or not self.last_seen.tzinfo:
            raise ValueError("Window timestamps must be timezone-aware")

    @classmethod
    def open(cls, identity: str, now: datetime) -> "RateLimitWindow":
        """Open a fresh window whose first attempt is `now`."""
        return cls(identity=identity, attempts=1, window_start=now, last_seen=now)

    def is_elapsed(self, now: datetime, window_size: timedelta) -> bool:
        """Check if the window has closed and the next request starts a new one."""
        return now - self.window_start >= window_size

    def is_exhausted(self, limit: int) -> bool:
        return self.attempts >= limit

    def is_stale(self, now: datetime, window_size: timedelta) -> bool:
        """Check if the window has been idle for more than two window sizes."""
        return now - self.last_seen > 2 * window_size

    def record_attempt(self, now: datetime) -> "RateLimitWindow":
        """Return a new window with one more allowed attempt."""
        return replace(self, attempts=self.attempts + 1, last_seen=now)

    def touch(self, now: datetime) -> "RateLimitWindow":
        """Return a new window noting a denied request without counting it."""
        return replace(self, last_seen=now)

    def seconds_until_reset(self, now: datetime, window_size: timedelta) -> int:
        """Whole seconds until the window closes, rounded up and at least 1."""
        remaining = (window_size - (now - self.window_start)).total_seconds()
        return max(1, math.ceil(remaining))


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a rate limit check.

    Attributes:
        identity: Identity the decision applies to
        allowed: True when the request may proceed
        wait_seconds: Seconds until the window resets, set only on denial
        attempts: Allowed attempts in the current window after this check
    """

    identity: str
    allowed: bool
    attempts: int
    wait_seconds: Optional[int] = None

    @classmethod
    def allowed_result(cls, identity: str, attempts: int) -> "RateLimitDecision":
        """Factory method for creating allowed decisions"""
        return cls(identity=identity, allowed=True, attempts=attempts)

    @classmethod
    def denied_result(cls, identity: str, attempts: int, wait_seconds: int) -> "RateLimitDecision":
        """Factory method for creating denied decisions"""
        return cls(identity=identity, allowed=False, attempts=attempts, wait_seconds=wait_seconds)

    @property
    def is_blocked(self) -> bool:
        return not self.allowed
