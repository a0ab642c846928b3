"""
Pytest configuration and fixtures for the Webinar Funnel API.

Provides reusable fixtures for all tests.
"""

import os
import pytest
from typing import Callable, Generator, Dict, Any, List

import httpx
from fastapi.testclient import TestClient


# Environment for the tests (must be set before the app is imported)
os.environ["API_BASE_URL"] = ""
os.environ["N8N_GET_SETTINGS_WEBHOOK"] = ""
os.environ["N8N_UPDATE_SETTINGS_WEBHOOK"] = ""
os.environ.setdefault("JWT_SECRET", "test_jwt_secret_at_least_32_chars_long")
os.environ.setdefault("FAILED_LOGIN_DELAY", "0")
os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("DEBUG", "true")

N8N_BASE_URL = "https://n8n.test/webhook"


@pytest.fixture(scope="session")
def test_settings():
    """Test settings."""
    from app.core.config import Settings
    return Settings()


@pytest.fixture
def test_client() -> Generator[TestClient, None, None]:
    """
    FastAPI test client.

    Creates an HTTP client for the endpoint tests.
    """
    from app.main import app
    with TestClient(app) as client:
        yield client


class RecordingHandler:
    """MockTransport handler that keeps every request it receives."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.responder = responder
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def make_transport():
    """
    Factory for fake n8n transports.

    Usage: handler, transport = make_transport(lambda request: httpx.Response(200, json={}))
    """
    def factory(responder):
        handler = RecordingHandler(responder)
        return handler, httpx.MockTransport(handler)
    return factory


@pytest.fixture
def make_webhook_client(make_transport):
    """Factory for WebhookClient instances backed by a fake transport."""
    from app.services.webhook_client import WebhookClient

    def factory(responder):
        handler, transport = make_transport(responder)
        return handler, WebhookClient(timeout=1.0, transport=transport)
    return factory


@pytest.fixture
def admin_token() -> str:
    """Valid admin token."""
    from app.services.auth_service import token_service
    return token_service.issue("admin")


@pytest.fixture
def admin_headers(admin_token) -> Dict[str, str]:
    """Authorization headers of an admin."""
    return {
        "Authorization": f"Bearer {admin_token}",
        "Content-Type": "application/json",
    }


@pytest.fixture
def sample_external_payload() -> Dict[str, Any]:
    """Complete settings row as returned by n8n."""
    return {
        "Admin Username": "webinar-admin",
        "Admin Password": "s3cret",
        "Registration Fee": "2999",
        "Registration Deadline": "07-11-2025",
        "Webinar Time": "08-11-2025",
        "Contact Email": "hello@pystack.com",
        "Whatsapp Invite Link": "https://chat.whatsapp.com/abc",
        "Discord Community Link": "https://discord.gg/pystack",
    }


@pytest.fixture
def valid_settings_update() -> Dict[str, Any]:
    """Valid body for PUT /api/admin/settings."""
    return {
        "adminUsername": "admin",
        "adminPassword": "",
        "coursePrice": 4999,
        "registrationDeadline": "2025-11-07",
        "webinarTime": "2025-11-08T19:00",
        "contactEmail": "webinar@pystack.com",
        "whatsappLink": "https://chat.whatsapp.com/abc",
        "discordLink": "https://discord.gg/pystack",
    }


@pytest.fixture
def sample_contact_payload() -> Dict[str, Any]:
    """Valid contact form."""
    return {
        "name": "Asha Verma",
        "email": "Asha.Verma@Example.com",
        "mobile": "9876543210",
        "query": "Will the recordings be available after the webinar?",
    }


# === Custom markers ===

def pytest_configure(config):
    """Registers the custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "security: marks tests as security-related"
    )
