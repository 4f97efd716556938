"""End-to-end email confirmation journey against the fully wired application.

The notifier is the only seam replaced: it records what would have been
delivered so the flow can follow the link the user would click.
"""

from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient

from src.core.application import create_application
from src.core.config.settings import settings
from src.infrastructure.dependency_injection.confirmation_dependencies import (
    get_confirmation_notifier,
)
from src.infrastructure.services.confirmation_notifier import LoggingConfirmationNotifier


class RecordingNotifier(LoggingConfirmationNotifier):
    def __init__(self):
        super().__init__(base_url="http://testserver", test_mode=True)
        self.outbox = []

    async def send_confirmation(self, identity, secret, language="en"):
        await super().send_confirmation(identity, secret, language)
        self.outbox.append((identity, self.build_confirmation_url(secret)))


@pytest.fixture
def outbox_notifier():
    return RecordingNotifier()


@pytest.fixture
def client(outbox_notifier):
    app = create_application()
    app.dependency_overrides[get_confirmation_notifier] = lambda: outbox_notifier
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _follow(client, url):
    parsed = urlparse(url)
    return client.get(parsed.path, params={"token": parse_qs(parsed.query)["token"][0]})


@pytest.mark.feature
def test_user_confirms_email_from_link(client, outbox_notifier):
    # Step 1: request a confirmation email
    response = client.post("/api/v1/send-confirmation", json={"email": "New.User@Example.com"})
    assert response.status_code == 200

    # Step 2: a second request while the first link is live is refused
    response = client.post("/api/v1/send-confirmation", json={"email": "new.user@example.com"})
    assert response.status_code == 429
    assert response.json()["code"] == "confirmation_already_pending"

    # Step 3: follow the link from the delivered message
    identity, url = outbox_notifier.outbox[-1]
    assert identity == "new.user@example.com"
    response = _follow(client, url)
    assert response.status_code == 200
    assert response.json()["email"] == "new.user@example.com"

    # Step 4: the link is single use
    response = _follow(client, url)
    assert response.status_code == 400
    assert response.json()["code"] == "token_not_found"


@pytest.mark.feature
def test_repeated_requests_hit_configured_limit(client, outbox_notifier):
    limit = settings.EMAIL_CONFIRMATION_RATE_LIMIT_MAX_ATTEMPTS

    for _ in range(limit):
        response = client.post("/api/v1/send-confirmation", json={"email": "user@example.com"})
        assert response.status_code == 200
        _follow(client, outbox_notifier.outbox[-1][1])

    response = client.post("/api/v1/send-confirmation", json={"email": "user@example.com"})

    assert response.status_code == 429
    assert response.json()["code"] == "rate_limited"
    assert 0 < int(response.headers["Retry-After"]) <= settings.EMAIL_CONFIRMATION_RATE_LIMIT_WINDOW_SECONDS

    # Maintenance reset lets the address through again
    response = client.post("/api/v1/confirmation/reset-rate-limits")
    assert response.status_code == 200
    response = client.post("/api/v1/send-confirmation", json={"email": "user@example.com"})
    assert response.status_code == 200


@pytest.mark.feature
def test_invalid_addresses_are_indistinguishable(client):
    details = set()
    for email in ["", "not-an-email", "a" * 400 + "@example.com"]:
        response = client.post("/api/v1/send-confirmation", json={"email": email})
        assert response.status_code == 400
        details.add(response.text)

    assert len(details) == 1
