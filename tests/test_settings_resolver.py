"""
Tests for the settings fallback resolver.

Covers:
- Unconfigured service (no network call)
- Live data from n8n
- Degraded responses on timeouts, network and remote errors
"""

import json

import httpx
import pytest
from pydantic import ValidationError as PydanticValidationError

from app.models.settings import DEFAULT_SETTINGS, ExternalSettingsPayload, Settings
from app.services.settings_service import SettingsResolver

from tests.conftest import N8N_BASE_URL


class TestUnconfigured:
    """Base URL unset or placeholder."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("base_url", ["", "API_URL"])
    async def test_defaults_without_network_call(self, make_webhook_client, base_url):
        handler, client = make_webhook_client(lambda request: httpx.Response(200, json={}))
        resolver = SettingsResolver(client=client, base_url=base_url)

        resolution = await resolver.resolve()

        assert resolution.source == "unconfigured"
        assert resolution.settings == DEFAULT_SETTINGS
        assert "not configured" in resolution.message
        assert handler.call_count == 0

    @pytest.mark.asyncio
    async def test_injected_defaults_used(self, make_webhook_client):
        _, client = make_webhook_client(lambda request: httpx.Response(200, json={}))
        custom = DEFAULT_SETTINGS.model_copy(update={"course_price": 1999.0})
        resolver = SettingsResolver(client=client, defaults=custom, base_url="")

        resolution = await resolver.resolve()

        assert resolution.settings.course_price == 1999.0


class TestLive:
    """n8n answers."""

    @pytest.mark.asyncio
    async def test_row_mapped(self, make_webhook_client, sample_external_payload):
        handler, client = make_webhook_client(
            lambda request: httpx.Response(200, json=sample_external_payload)
        )
        resolver = SettingsResolver(client=client, base_url=N8N_BASE_URL)

        resolution = await resolver.resolve()

        assert resolution.source == "live"
        assert resolution.message is None
        assert resolution.settings.registration_deadline == "2025-11-07"
        assert resolution.settings.course_price == 2999

        assert handler.call_count == 1
        request = handler.requests[0]
        assert request.method == "POST"
        assert str(request.url) == f"{N8N_BASE_URL}/get-settings"
        assert json.loads(request.content) == {"action": "get_settings"}

    @pytest.mark.asyncio
    async def test_list_response_uses_first_row(self, make_webhook_client, sample_external_payload):
        _, client = make_webhook_client(
            lambda request: httpx.Response(200, json=[sample_external_payload])
        )
        resolver = SettingsResolver(client=client, base_url=N8N_BASE_URL)

        resolution = await resolver.resolve()

        assert resolution.settings.admin_username == "webinar-admin"

    @pytest.mark.asyncio
    async def test_unexpected_shape_maps_to_defaults(self, make_webhook_client):
        _, client = make_webhook_client(lambda request: httpx.Response(200, json="ok"))
        resolver = SettingsResolver(client=client, base_url=N8N_BASE_URL)

        resolution = await resolver.resolve()

        assert resolution.source == "live"
        assert resolution.settings == DEFAULT_SETTINGS

    @pytest.mark.asyncio
    async def test_explicit_read_url(self, make_webhook_client):
        handler, client = make_webhook_client(lambda request: httpx.Response(200, json={}))
        resolver = SettingsResolver(
            client=client,
            base_url=N8N_BASE_URL,
            get_settings_url="https://hooks.test/settings",
        )

        await resolver.resolve()

        assert str(handler.requests[0].url) == "https://hooks.test/settings"


class TestDegraded:
    """n8n failing: defaults with an explanation, never an exception."""

    @staticmethod
    def _raise(exc_type, message):
        def responder(request):
            raise exc_type(message, request=request)
        return responder

    @pytest.mark.asyncio
    @pytest.mark.parametrize("responder_factory", [
        lambda: TestDegraded._raise(httpx.ReadTimeout, "timed out"),
        lambda: TestDegraded._raise(httpx.ConnectError, "connection refused"),
        lambda: (lambda request: httpx.Response(500, json={"error": "boom"})),
        lambda: (lambda request: httpx.Response(200, text="<html>not json</html>")),
    ])
    async def test_defaults_on_failure(self, make_webhook_client, responder_factory):
        handler, client = make_webhook_client(responder_factory())
        resolver = SettingsResolver(client=client, base_url=N8N_BASE_URL)

        resolution = await resolver.resolve()

        assert resolution.source == "degraded"
        assert resolution.settings == DEFAULT_SETTINGS
        assert "unavailable" in resolution.message
        assert handler.call_count == 1


class TestExternalPayload:
    """Normalization of the raw webhook response."""

    def test_settings_envelope_unwrapped(self, sample_external_payload):
        payload = ExternalSettingsPayload.from_response(
            {"success": True, "settings": sample_external_payload}
        )
        assert payload.contact_email == "hello@pystack.com"

    def test_none_gives_empty_payload(self):
        payload = ExternalSettingsPayload.from_response(None)
        assert all(value is None for value in payload.model_dump().values())

    def test_defaults_are_immutable(self):
        with pytest.raises(PydanticValidationError):
            DEFAULT_SETTINGS.course_price = 0
        assert isinstance(DEFAULT_SETTINGS, Settings)
