"""Result objects returned by the email confirmation service.

The service answers every public call with one of these instead of raising,
so callers branch on ``ok`` / ``valid`` and show ``message`` to the user. The
``error_code`` mirrors the exception code of the underlying failure and is
meant for logs and metrics, not for display.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TokenRequestResult:
    """Outcome of a confirmation token request.

    Attributes:
        ok: True when a token was issued
        secret: The issued secret; hand it to the notifier, never to the client
        identity: Normalized identity the secret is bound to
        message: User-facing failure text
        error_code: Machine-readable failure kind
        wait_seconds: Seconds until a retry can succeed, set when rate limited
    """

    ok: bool
    secret: Optional[str] = None
    identity: Optional[str] = None
    message: Optional[str] = None
    error_code: Optional[str] = None
    wait_seconds: Optional[int] = None

    @classmethod
    def issued(cls, secret: str, identity: str) -> "TokenRequestResult":
        return cls(ok=True, secret=secret, identity=identity)

    @classmethod
    def rejected(
        cls, message: str, error_code: str, wait_seconds: Optional[int] = None
    ) -> "TokenRequestResult":
        return cls(ok=False, message=message, error_code=error_code, wait_seconds=wait_seconds)

    def __repr__(self) -> str:
        secret = f"'{self.secret[:8]}...'" if self.secret else None
        return (
            f"TokenRequestResult(ok={self.ok}, secret={secret}, "
            f"error_code={self.error_code!r}, wait_seconds={self.wait_seconds})"
        )


@dataclass(frozen=True)
class TokenVerificationResult:
    """Outcome of presenting a confirmation secret.

    Attributes:
        valid: True when the secret was live; it is now consumed
        identity: The confirmed identity on success
        message: User-facing failure text
        error_code: ``token_not_found`` or ``token_expired`` on failure
    """

    valid: bool
    identity: Optional[str] = None
    message: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def confirmed(cls, identity: str) -> "TokenVerificationResult":
        return cls(valid=True, identity=identity)

    @classmethod
    def rejected(cls, message: str, error_code: str) -> "TokenVerificationResult":
        return cls(valid=False, message=message, error_code=error_code)


@dataclass(frozen=True)
class SweepResult:
    """Records evicted by one maintenance sweep."""

    tokens_evicted: int
    windows_evicted: int

    @property
    def total(self) -> int:
        return self.tokens_evicted + self.windows_evicted


@dataclass(frozen=True)
class ConfirmationStats:
    """Monitoring snapshot of the confirmation stores."""

    total_tokens: int
    expired_tokens: int
    tracked_windows: int
