"""Unit tests for EmailConfirmationService.

The service runs against real in-memory stores and a fake clock so that
window and expiry boundaries can be hit exactly.
"""

from datetime import timedelta
from types import SimpleNamespace

import pytest

from src.domain.services.email_confirmation.email_confirmation_service import (
    EmailConfirmationService,
)
from src.utils.i18n import get_translated_message

EMAIL = "user@example.com"


class TestRequestToken:
    """Test cases for request_token."""

    def test_issues_secret_for_valid_email(self, confirmation_service):
        # Act
        result = confirmation_service.request_token(EMAIL)

        # Assert
        assert result.ok is True
        assert len(result.secret) == 64
        assert result.identity == EMAIL
        assert result.message is None
        assert confirmation_service.has_pending_token(EMAIL) is True

    def test_normalizes_identity(self, confirmation_service):
        result = confirmation_service.request_token("  User@Example.COM ")

        assert result.identity == EMAIL
        assert confirmation_service.has_pending_token(EMAIL) is True

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "not-an-email",
            "a" * 400 + "@example.com",
            "user@localhost",
            "victim\n@example.com",
            None,
        ],
    )
    def test_invalid_identity_gets_generic_message(self, confirmation_service, raw):
        # Act
        result = confirmation_service.request_token(raw)

        # Assert
        assert result.ok is False
        assert result.secret is None
        assert result.error_code == "invalid_identity"
        assert result.message == get_translated_message("invalid_identity_generic", "en")
        assert len(confirmation_service.token_store) == 0

    def test_invalid_identity_does_not_touch_rate_limiter(self, confirmation_service):
        confirmation_service.request_token("not-an-email")

        assert len(confirmation_service.rate_limiter) == 0

    def test_invalid_identity_message_in_spanish(self, confirmation_service):
        result = confirmation_service.request_token("not-an-email", "es")

        assert result.message == get_translated_message("invalid_identity_generic", "es")
        assert result.message != get_translated_message("invalid_identity_generic", "en")

    def test_rate_limited_after_limit(self, confirmation_service, clock):
        # Arrange
        for _ in range(3):
            assert confirmation_service.request_token(EMAIL).ok

        # Act
        clock.advance(minutes=30)
        result = confirmation_service.request_token(EMAIL)

        # Assert
        assert result.ok is False
        assert result.error_code == "rate_limited"
        assert result.wait_seconds == 1800
        assert "1800" in result.message
        assert len(confirmation_service.token_store) == 3

    def test_rate_limit_is_per_normalized_identity(self, confirmation_service):
        for raw in ["USER@example.com", " user@EXAMPLE.com", "user@example.com"]:
            assert confirmation_service.request_token(raw).ok

        assert confirmation_service.request_token("User@Example.Com").error_code == "rate_limited"
        assert confirmation_service.request_token("other@example.com").ok

    def test_denied_requests_do_not_extend_window(self, confirmation_service, clock):
        # Arrange
        for _ in range(3):
            confirmation_service.request_token(EMAIL)

        # Act
        for _ in range(5):
            clock.advance(minutes=10)
            confirmation_service.request_token(EMAIL)

        # Assert
        assert confirmation_service.rate_limiter.get_window(EMAIL).attempts == 3
        clock.advance(minutes=10)
        assert confirmation_service.request_token(EMAIL).ok

    def test_new_window_after_window_size(self, confirmation_service, clock):
        for _ in range(3):
            confirmation_service.request_token(EMAIL)

        clock.advance(hours=1)
        result = confirmation_service.request_token(EMAIL)

        assert result.ok is True
        assert confirmation_service.rate_limiter.get_window(EMAIL).attempts == 1

    def test_each_request_mints_an_additional_token(self, confirmation_service):
        first = confirmation_service.request_token(EMAIL)
        second = confirmation_service.request_token(EMAIL)

        assert first.secret != second.secret
        assert confirmation_service.verify_token(first.secret).valid
        assert confirmation_service.verify_token(second.secret).valid

    def test_request_sweeps_expired_tokens_first(self, confirmation_service, clock):
        # Arrange
        confirmation_service.request_token(EMAIL)
        clock.advance(hours=25)

        # Act
        confirmation_service.request_token("other@example.com")

        # Assert
        assert len(confirmation_service.token_store) == 1
        assert confirmation_service.rate_limiter.get_window(EMAIL) is None


class TestVerifyToken:
    """Test cases for verify_token."""

    def test_verifies_exactly_once(self, confirmation_service):
        # Arrange
        secret = confirmation_service.request_token(EMAIL).secret

        # Act
        first = confirmation_service.verify_token(secret)
        second = confirmation_service.verify_token(secret)

        # Assert
        assert first.valid is True
        assert first.identity == EMAIL
        assert second.valid is False
        assert second.error_code == "token_not_found"
        assert second.message == get_translated_message("confirmation_token_not_found", "en")

    def test_valid_at_expiry_instant(self, confirmation_service, clock):
        secret = confirmation_service.request_token(EMAIL).secret

        clock.advance(hours=24)

        assert confirmation_service.verify_token(secret).valid is True

    def test_expired_then_not_found(self, confirmation_service, clock):
        # Arrange
        secret = confirmation_service.request_token(EMAIL).secret
        clock.advance(hours=24, seconds=1)

        # Act
        first = confirmation_service.verify_token(secret)
        second = confirmation_service.verify_token(secret)

        # Assert
        assert first.valid is False
        assert first.error_code == "token_expired"
        assert first.message == get_translated_message("confirmation_token_expired", "en")
        assert second.error_code == "token_not_found"

    @pytest.mark.parametrize("secret", ["", "x" * 64, "short", None])
    def test_unknown_secret(self, confirmation_service, secret):
        result = confirmation_service.verify_token(secret)

        assert result.valid is False
        assert result.error_code == "token_not_found"

    def test_verify_does_not_affect_rate_limit(self, confirmation_service):
        for _ in range(3):
            secret = confirmation_service.request_token(EMAIL).secret
            confirmation_service.verify_token(secret)

        assert confirmation_service.request_token(EMAIL).error_code == "rate_limited"


class TestHasPendingToken:
    """Test cases for has_pending_token."""

    def test_lifecycle(self, confirmation_service, clock):
        assert confirmation_service.has_pending_token(EMAIL) is False

        secret = confirmation_service.request_token(EMAIL).secret
        assert confirmation_service.has_pending_token(EMAIL) is True

        confirmation_service.verify_token(secret)
        assert confirmation_service.has_pending_token(EMAIL) is False

        confirmation_service.request_token(EMAIL)
        clock.advance(hours=24, seconds=1)
        assert confirmation_service.has_pending_token(EMAIL) is False

    @pytest.mark.parametrize("raw", ["", "not-an-email", None])
    def test_invalid_identity_has_nothing_pending(self, confirmation_service, raw):
        assert confirmation_service.has_pending_token(raw) is False

    def test_is_read_only(self, confirmation_service):
        confirmation_service.request_token(EMAIL)

        for _ in range(10):
            confirmation_service.has_pending_token(EMAIL)

        assert len(confirmation_service.token_store) == 1
        assert confirmation_service.rate_limiter.get_window(EMAIL).attempts == 1


class TestSweepExpired:
    """Test cases for sweep_expired."""

    def test_evicts_expired_tokens_and_stale_windows(self, confirmation_service, clock):
        # Arrange
        confirmation_service.request_token(EMAIL)
        clock.advance(hours=2, seconds=1)
        confirmation_service.request_token("other@example.com")
        clock.advance(hours=22)

        # Act
        result = confirmation_service.sweep_expired()

        # Assert
        assert result.tokens_evicted == 1
        assert result.windows_evicted == 1
        assert confirmation_service.has_pending_token("other@example.com") is True

    def test_is_idempotent(self, confirmation_service, clock):
        confirmation_service.request_token(EMAIL)
        clock.advance(days=2)

        first = confirmation_service.sweep_expired()
        second = confirmation_service.sweep_expired()

        assert first.total == 2
        assert second.total == 0

    def test_accepts_explicit_time(self, confirmation_service, clock):
        confirmation_service.request_token(EMAIL)

        result = confirmation_service.sweep_expired(clock.now + timedelta(days=2))

        assert result.tokens_evicted == 1
        assert result.windows_evicted == 1


class TestMaintenance:
    """Statistics and rate limit reset."""

    def test_get_stats(self, confirmation_service, clock):
        confirmation_service.request_token(EMAIL)
        clock.advance(hours=2)
        confirmation_service.request_token("other@example.com")
        clock.advance(hours=23)

        stats = confirmation_service.get_stats()

        assert stats.total_tokens == 2
        assert stats.expired_tokens == 1
        assert stats.tracked_windows == 2

    def test_reset_rate_limits(self, confirmation_service):
        for _ in range(3):
            confirmation_service.request_token(EMAIL)

        cleared = confirmation_service.reset_rate_limits()

        assert cleared == 1
        assert confirmation_service.request_token(EMAIL).ok


def test_from_settings(clock):
    # Arrange
    settings = SimpleNamespace(
        EMAIL_CONFIRMATION_TOKEN_TTL_HOURS=2,
        EMAIL_CONFIRMATION_RATE_LIMIT_MAX_ATTEMPTS=7,
        EMAIL_CONFIRMATION_RATE_LIMIT_WINDOW_SECONDS=120,
    )

    # Act
    service = EmailConfirmationService.from_settings(settings, clock=clock)

    # Assert
    assert service.token_store.ttl == timedelta(hours=2)
    assert service.rate_limiter.limit == 7
    assert service.rate_limiter.window_size == timedelta(seconds=120)
