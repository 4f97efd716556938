"""Rate Limiting Domain Module

Per-identity throttling for confirmation requests.
"""

from .services import FixedWindowRateLimiter

__all__ = [
    "FixedWindowRateLimiter",
]
