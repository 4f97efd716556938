"""Confirmation token value object."""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import ClassVar


@dataclass(frozen=True, slots=True)
class ConfirmationToken:
    """A one-time confirmation token bound to an identity.

    The secret is the lookup key; the record is never updated in place. A
    token stays verifiable while ``now <= expires_at``.
    """

    identity: str
    secret: str
    issued_at: datetime
    expires_at: datetime

    # 32 bytes of entropy (256 bits), hex encoded
    SECRET_BYTES: ClassVar[int] = 32

    @staticmethod
    def generate_secret() -> str:
        return secrets.token_hex(ConfirmationToken.SECRET_BYTES)

    @classmethod
    def issue(cls, identity: str, secret: str, now: datetime, ttl: timedelta) -> "ConfirmationToken":
        return cls(identity=identity, secret=secret, issued_at=now, expires_at=now + ttl)

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def __repr__(self) -> str:
        # Never render the full secret
        return (
            f"ConfirmationToken(secret='{self.secret[:8]}...', "
            f"expires_at={self.expires_at.isoformat()})"
        )
