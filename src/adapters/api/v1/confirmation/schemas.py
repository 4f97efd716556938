from __future__ import annotations

"""Request and response schemas for the email confirmation API."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class SendConfirmationRequest(BaseModel):
    """Payload for requesting a confirmation email.

    The address is validated by the domain, not here, so every malformed
    input receives the same generic error.
    """

    email: str


class MessageResponse(BaseModel):
    """Simple envelope used for *200* acknowledgments."""

    message: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ConfirmEmailResponse(MessageResponse):
    email: str


class SweepResponse(BaseModel):
    tokens_evicted: int
    windows_evicted: int


class ConfirmationStatsResponse(BaseModel):
    total_tokens: int
    expired_tokens: int
    tracked_windows: int


class ResetRateLimitsResponse(MessageResponse):
    cleared: int
