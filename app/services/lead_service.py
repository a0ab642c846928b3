"""
Lead capture service.

Forwards contact form submissions to the n8n contact-form webhook.
Without n8n the submission is acknowledged locally.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Optional

from app.core.config import settings, is_configured_base_url
from app.models.lead import ContactFormPayload
from app.services.webhook_client import WebhookClient, webhook_client

logger = logging.getLogger(__name__)


class LeadService:
    """Sends contact form leads to n8n."""

    def __init__(
        self,
        client: Optional[WebhookClient] = None,
        base_url: Optional[str] = None
    ):
        self.client = client or webhook_client
        self.base_url = settings.api_base_url if base_url is None else base_url.rstrip("/")

    async def submit_contact(
        self,
        payload: ContactFormPayload,
        ip_address: Optional[str] = None
    ) -> dict:
        """
        Records a contact form submission.

        Args:
            payload: Validated contact form.
            ip_address: Client IP.

        Returns:
            Dictionary with message, ticket_id and query_timestamp.

        Raises:
            WebhookError: n8n is configured but the call failed.
        """
        record = payload.to_webhook_record(
            query_timestamp=datetime.now(timezone.utc).isoformat(),
            ip_address=ip_address,
        )
        logger.info(f"📧 Contact form submission from {record.email}")

        result = {
            "message": "Thank you for your message. We will get back to you soon!",
            "ticket_id": f"ticket_{int(time.time() * 1000)}",
            "query_timestamp": record.query_timestamp,
        }

        if not is_configured_base_url(self.base_url):
            logger.warning("API_BASE_URL not configured, contact form acknowledged locally")
            return result

        data = await self.client.post(f"{self.base_url}/contact-form", record.model_dump())
        logger.info("✅ Contact form sent to n8n")

        if isinstance(data, dict):
            result["message"] = data.get("message") or result["message"]
            result["ticket_id"] = data.get("ticket_id") or result["ticket_id"]
        return result


# Global instance
lead_service = LeadService()
