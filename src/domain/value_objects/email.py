"""A Value Object representing an email address identity in the domain.

This class encapsulates the normalization and validation rules of the identity
used for confirmation tokens and rate limiting. As a Value Object, it is
immutable, and equality is based on its value (the normalized email string).

Validation is a pure function of the input: no lookups, no I/O. Every failure
raises `InvalidIdentityError` whose user-facing message is identical for all
rules; the failing rule is only recorded in `reason` for logging.
"""

import re
from dataclasses import dataclass
from typing import ClassVar

from structlog import get_logger

from src.core.exceptions import InvalidIdentityError

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Email:
    """An immutable, self-validating email identity.

    This Value Object enforces several business rules upon instantiation:
    - Is trimmed and normalized to lowercase.
    - Is not empty and at most 320 characters long.
    - Has a local part of at most 64 characters.
    - Has a domain of dot-separated labels, each at most 63 characters.

    Attributes:
        value: The normalized string representation of the email address.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 320
    MAX_LOCAL_PART_LENGTH: ClassVar[int] = 64
    MAX_LABEL_LENGTH: ClassVar[int] = 63
    LOCAL_PART_PATTERN: ClassVar[re.Pattern] = re.compile(r"[a-z0-9._%+-]+")
    LABEL_PATTERN: ClassVar[re.Pattern] = re.compile(r"[a-z0-9](?:[a-z0-9-]*[a-z0-9])?")
    TLD_PATTERN: ClassVar[re.Pattern] = re.compile(r"[a-z]{2,}")

    def __post_init__(self):
        """Performs validation and normalization after initialization."""
        if not isinstance(self.value, str):
            raise InvalidIdentityError(reason="not_a_string")

        normalized_value = self.value.strip().lower()
        object.__setattr__(self, "value", normalized_value)

        self._validate_length(normalized_value)
        self._validate_format(normalized_value)

    def _validate_length(self, value: str) -> None:
        """Validates the overall length of the email address."""
        if not value:
            raise InvalidIdentityError(reason="empty")
        if len(value) > self.MAX_LENGTH:
            raise InvalidIdentityError(reason="too_long")

    def _validate_format(self, value: str) -> None:
        """Validates the local part and every domain label."""
        local, sep, domain = value.partition("@")
        if not sep or not local or not domain or "@" in domain:
            raise InvalidIdentityError(reason="malformed")

        if len(local) > self.MAX_LOCAL_PART_LENGTH:
            raise InvalidIdentityError(reason="local_part_too_long")
        if not self.LOCAL_PART_PATTERN.fullmatch(local):
            raise InvalidIdentityError(reason="malformed")
        if local.startswith(".") or local.endswith(".") or ".." in local:
            raise InvalidIdentityError(reason="malformed")

        labels = domain.split(".")
        if len(labels) < 2:
            raise InvalidIdentityError(reason="malformed")
        for label in labels:
            if len(label) > self.MAX_LABEL_LENGTH:
                raise InvalidIdentityError(reason="label_too_long")
            if not self.LABEL_PATTERN.fullmatch(label):
                raise InvalidIdentityError(reason="malformed")
        if not self.TLD_PATTERN.fullmatch(labels[-1]):
            raise InvalidIdentityError(reason="malformed")

    def mask_for_logging(self) -> str:
        """Returns a masked version of the email for safe logging.

        Example: 'us**@e*********m'
        """
        return mask_identity(self.value)

    def __str__(self) -> str:
        """Returns the string representation of the email."""
        return self.value


def validate_identity(raw: object) -> str:
    """Normalize and validate a raw identity string.

    Args:
        raw: Untrusted input, usually an email address typed by a user.

    Returns:
        str: The trimmed, lower-cased identity.

    Raises:
        InvalidIdentityError: If the input is empty, oversized or malformed.
    """
    return Email(raw).value


def mask_identity(identity: str) -> str:
    """Mask an identity string for logs, keeping two characters of each side."""
    local, sep, domain_part = identity.partition("@")
    if not sep:
        return f"{identity[:2]}***"
    masked_local = f"{local[:2]}{'*' * max(len(local) - 2, 0)}"
    masked_domain = f"{domain_part[:1]}{'*' * max(len(domain_part) - 2, 0)}{domain_part[-1:]}"
    return f"{masked_local}@{masked_domain}"
