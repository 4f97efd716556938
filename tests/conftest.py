import os
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

os.environ.setdefault("APP_ENV", "test")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.core.application import create_application
from src.domain.interfaces.email_confirmation import INotifier
from src.domain.rate_limiting.services import FixedWindowRateLimiter
from src.domain.services.email_confirmation.email_confirmation_service import (
    EmailConfirmationService,
)
from src.domain.services.email_confirmation.token_store import ConfirmationTokenStore
from src.utils.i18n import setup_i18n

TEST_WINDOW = timedelta(hours=1)
TEST_TTL = timedelta(hours=24)


class FakeClock:
    """Manually advanced clock shared by a service and its tests."""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture(scope="session", autouse=True)
def setup_translations():
    """Load translation catalogs once for the whole session."""
    setup_i18n()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_store():
    return ConfirmationTokenStore(ttl=TEST_TTL)


@pytest.fixture
def rate_limiter():
    return FixedWindowRateLimiter(limit=3, window_size=TEST_WINDOW)


@pytest.fixture
def confirmation_service(token_store, rate_limiter, clock):
    return EmailConfirmationService(token_store, rate_limiter, clock=clock)


@pytest.fixture
def notifier():
    mock_notifier = AsyncMock(spec=INotifier)
    mock_notifier.send_confirmation.return_value = None
    return mock_notifier


@pytest.fixture
def app(confirmation_service, notifier):
    """Application wired to the test service without running the lifespan."""
    application = create_application()
    application.state.confirmation_service = confirmation_service
    application.state.confirmation_notifier = notifier
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def async_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
