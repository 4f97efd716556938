"""Email confirmation endpoints.

Thin HTTP layer over the confirmation service used by the registration flow.
All issuance and verification rules live in the domain service; this module
only maps results to HTTP responses and hands issued secrets to the notifier
after the service has returned.

The secret is never included in a response body.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status

from src.adapters.api.v1.confirmation.schemas import (
    ConfirmationStatsResponse,
    ConfirmEmailResponse,
    MessageResponse,
    ResetRateLimitsResponse,
    SendConfirmationRequest,
    SweepResponse,
)
from src.core.config.settings import settings
from src.core.exceptions import (
    InvalidIdentityError,
    RateLimitError,
    RateLimitExceededError,
    TokenExpiredError,
    TokenNotFoundError,
)
from src.domain.value_objects.confirmation_result import TokenRequestResult
from src.infrastructure.dependency_injection.confirmation_dependencies import (
    ConfirmationNotifierDep,
    ConfirmationServiceDep,
)
from src.utils.i18n import get_request_language, get_translated_message

logger = structlog.get_logger(__name__)
router = APIRouter()


def require_dev_tools(request: Request) -> None:
    """Reject maintenance calls unless dev tools are enabled outside production."""
    if not settings.dev_tools_enabled:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=get_translated_message(
                "confirmation_dev_tools_disabled", get_request_language(request)
            ),
        )


def _raise_for_rejected_request(result: TokenRequestResult) -> None:
    if result.error_code == "rate_limited":
        raise RateLimitExceededError(result.wait_seconds, message=result.message)
    raise InvalidIdentityError(reason=result.error_code, message=result.message)


@router.post(
    "/send-confirmation",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Send a confirmation email",
)
async def send_confirmation(
    request: Request,
    payload: SendConfirmationRequest,
    service: ConfirmationServiceDep,
    notifier: ConfirmationNotifierDep,
):
    """Issue a confirmation token and hand it to the notifier.

    Refuses with 429 while a confirmation for the address is still pending,
    and with 429 plus ``Retry-After`` when the address is rate limited.
    """
    language = get_request_language(request)

    # Best-effort guard: the check and the mint are separate calls, so two
    # concurrent sends for one address can both mint. Several live tokens per
    # identity are valid; the rate limiter still bounds the total.
    if service.has_pending_token(payload.email):
        raise RateLimitError(
            message=get_translated_message("confirmation_already_pending", language),
            code="confirmation_already_pending",
        )

    result = service.request_token(payload.email, language)
    if not result.ok:
        _raise_for_rejected_request(result)

    # The token stays valid if delivery fails; NotifierError maps to 503.
    await notifier.send_confirmation(result.identity, result.secret, language)

    return MessageResponse(message=get_translated_message("confirmation_email_sent", language))


@router.get(
    "/confirm-email",
    response_model=ConfirmEmailResponse,
    status_code=status.HTTP_200_OK,
    summary="Confirm an email address",
)
async def confirm_email(request: Request, token: str, service: ConfirmationServiceDep):
    """Consume a confirmation token. Each token confirms exactly once."""
    language = get_request_language(request)

    result = service.verify_token(token, language)
    if not result.valid:
        if result.error_code == "token_expired":
            raise TokenExpiredError(message=result.message)
        raise TokenNotFoundError(message=result.message)

    return ConfirmEmailResponse(
        message=get_translated_message("email_confirmed_successfully", language),
        email=result.identity,
    )


@router.post(
    "/confirmation/sweep",
    response_model=SweepResponse,
    dependencies=[Depends(require_dev_tools)],
    summary="Evict expired tokens and stale rate limit windows",
)
async def sweep_expired(service: ConfirmationServiceDep):
    result = service.sweep_expired()
    return SweepResponse(
        tokens_evicted=result.tokens_evicted,
        windows_evicted=result.windows_evicted,
    )


@router.post(
    "/confirmation/reset-rate-limits",
    response_model=ResetRateLimitsResponse,
    dependencies=[Depends(require_dev_tools)],
    summary="Reset all confirmation rate limits (development only)",
)
async def reset_rate_limits(request: Request, service: ConfirmationServiceDep):
    cleared = service.reset_rate_limits()
    logger.info("Confirmation rate limits reset via API", cleared=cleared)
    return ResetRateLimitsResponse(
        message=get_translated_message(
            "confirmation_rate_limits_reset", get_request_language(request)
        ),
        cleared=cleared,
    )


@router.get(
    "/confirmation/stats",
    response_model=ConfirmationStatsResponse,
    dependencies=[Depends(require_dev_tools)],
    summary="Confirmation store statistics (development only)",
)
async def confirmation_stats(service: ConfirmationServiceDep):
    stats = service.get_stats()
    return ConfirmationStatsResponse(
        total_tokens=stats.total_tokens,
        expired_tokens=stats.expired_tokens,
        tracked_windows=stats.tracked_windows,
    )
