"""Dependencies for the email confirmation API.

The confirmation service and notifier are built once by the application
lifespan and stored on ``app.state``; these factories hand the shared
instances to request handlers. Tests swap them through
``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, Request

from src.core.config.settings import settings
from src.domain.interfaces.email_confirmation import IEmailConfirmationService, INotifier
from src.domain.services.email_confirmation.email_confirmation_service import (
    EmailConfirmationService,
)
from src.infrastructure.services.confirmation_notifier import LoggingConfirmationNotifier


def build_confirmation_service() -> EmailConfirmationService:
    """Create the process-wide confirmation service from settings."""
    return EmailConfirmationService.from_settings(settings)


def build_notifier() -> INotifier:
    """Create the process-wide confirmation notifier from settings."""
    return LoggingConfirmationNotifier(
        base_url=settings.EMAIL_CONFIRMATION_BASE_URL,
        test_mode=settings.APP_ENV in ("development", "test"),
    )


def get_email_confirmation_service(request: Request) -> IEmailConfirmationService:
    return request.app.state.confirmation_service


def get_confirmation_notifier(request: Request) -> INotifier:
    return request.app.state.confirmation_notifier


ConfirmationServiceDep = Annotated[IEmailConfirmationService, Depends(get_email_confirmation_service)]
ConfirmationNotifierDep = Annotated[INotifier, Depends(get_confirmation_notifier)]
