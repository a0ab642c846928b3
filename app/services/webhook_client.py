"""
HTTP client for the n8n workflow automation webhooks.

One POST per call, JSON in and JSON out, bounded by a timeout.
No retries: callers decide how to degrade.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from app.core.config import settings
from app.core.error_handler import (
    WebhookNetworkError,
    WebhookRemoteError,
    WebhookResponseError,
    WebhookTimeoutError,
)

logger = logging.getLogger(__name__)

USER_AGENT = "Webinar-Sales-Funnel/1.0.0"


class WebhookClient:
    """
    Client for outbound webhook calls.

    A new httpx.AsyncClient is opened per call so that requests never
    share state.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initializes the client.

        Args:
            timeout: Default timeout in seconds. Uses settings.webhook_timeout.
            transport: Optional httpx transport (httpx.MockTransport in tests).
        """
        self.timeout = timeout or settings.webhook_timeout
        self._transport = transport

    async def post(
        self,
        url: str,
        body: dict,
        timeout: Optional[float] = None
    ) -> Any:
        """
        Sends a JSON POST and returns the parsed response body.

        Args:
            url: Full webhook URL.
            body: JSON body.
            timeout: Timeout in seconds for this call.

        Returns:
            Parsed JSON body ({} when the body is empty).

        Raises:
            WebhookTimeoutError: No response within the timeout.
            WebhookNetworkError: Connection could not be established.
            WebhookRemoteError: Non-2xx status.
            WebhookResponseError: 2xx with a non-JSON body.
        """
        timeout = timeout or self.timeout
        logger.info(f"🌐 Webhook request: POST {url}")

        try:
            async with httpx.AsyncClient(
                timeout=timeout,
                transport=self._transport,
                headers={"User-Agent": USER_AGENT},
            ) as client:
                response = await client.post(url, json=body)
        except httpx.TimeoutException as e:
            logger.error(f"❌ Webhook timeout after {timeout:g}s: {url}")
            raise WebhookTimeoutError(url, timeout) from e
        except httpx.RequestError as e:
            logger.error(f"❌ Network error: {url} ({e})")
            raise WebhookNetworkError(url, str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.error(f"❌ Webhook error: {response.status_code} {url}")
            raise WebhookRemoteError(url, response.status_code, _body_of(response))

        logger.info(f"✅ Webhook response: {response.status_code} {url}")

        if not response.content.strip():
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise WebhookResponseError(url, response.text) from e


def _body_of(response: httpx.Response) -> Any:
    """Error body, parsed when it is JSON."""
    try:
        return response.json()
    except ValueError:
        return response.text


# Global instance for direct import
webhook_client = WebhookClient()
