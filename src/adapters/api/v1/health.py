from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel

from src.core.config.settings import settings
from src.infrastructure.dependency_injection.confirmation_dependencies import (
    ConfirmationServiceDep,
)
from src.utils.i18n import get_request_language, get_translated_message

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str
    message: str
    timestamp: datetime


@router.get("", response_model=HealthResponse)
async def health_check(request: Request, service: ConfirmationServiceDep):
    """
    Liveness check. Touches the confirmation stores so a wedged lock shows up
    as a hung health probe.
    """
    service.get_stats()
    return HealthResponse(
        status="ok",
        env=settings.APP_ENV,
        message=get_translated_message("service_healthy", get_request_language(request)),
        timestamp=datetime.now(timezone.utc),
    )
