"""
Settings service: reading and updating the webinar settings.

Read path (GET /api/settings):
1. n8n not configured -> hard-coded defaults, no network call
2. n8n configured -> POST get-settings, mapped through the field mapper
3. n8n failing -> hard-coded defaults with the failure reason

Write path (PUT /api/admin/settings):
1. Ordered validation of the update request (first failure wins)
2. Formatting into the label-keyed "Admin" sheet row
3. Single POST to n8n post-settings; failures are surfaced
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from app.core.config import settings as app_settings, is_configured_base_url
from app.core.error_handler import ConfigurationError, ValidationError, WebhookError
from app.models.settings import (
    DEFAULT_SETTINGS,
    ExternalSettingsPayload,
    Settings,
    SettingsSource,
    SettingsUpdateRequest,
    SheetRow,
)
from app.services.field_mapper import map_external_to_settings
from app.services.webhook_client import WebhookClient, webhook_client
from app.utils.validators import (
    format_amount,
    format_sheet_date,
    is_blank,
    is_http_url,
    is_simple_email,
    parse_calendar_date,
    parse_strict_float,
)

logger = logging.getLogger(__name__)

REQUIRED_UPDATE_FIELDS = (
    "adminUsername",
    "coursePrice",
    "registrationDeadline",
    "webinarTime",
    "contactEmail",
    "whatsappLink",
    "discordLink",
)

NOT_CONFIGURED_MESSAGE = "Settings service not configured (API_BASE_URL unset), using default settings"


@dataclass(frozen=True)
class SettingsResolution:
    """Outcome of one settings read."""

    settings: Settings
    source: SettingsSource
    message: Optional[str] = None


class SettingsResolver:
    """
    Resolves the settings for one request.

    Stateless: nothing is cached between calls, so concurrent requests
    need no locking.
    """

    def __init__(
        self,
        client: Optional[WebhookClient] = None,
        defaults: Settings = DEFAULT_SETTINGS,
        base_url: Optional[str] = None,
        get_settings_url: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        """
        Initializes the resolver.

        Args:
            client: Webhook client. The shared webhook_client by default.
            defaults: Immutable fallback settings.
            base_url: n8n base URL. Uses settings.api_base_url.
            get_settings_url: Read webhook URL. Derived from base_url by default.
            timeout: Read timeout in seconds. Uses settings.webhook_timeout.
        """
        self.client = client or webhook_client
        self.defaults = defaults
        self.base_url = app_settings.api_base_url if base_url is None else base_url.rstrip("/")
        if get_settings_url:
            self.get_settings_url = get_settings_url
        elif base_url is None:
            self.get_settings_url = app_settings.get_settings_url
        else:
            self.get_settings_url = f"{self.base_url}/get-settings"
        self.timeout = timeout or app_settings.webhook_timeout

    @property
    def configured(self) -> bool:
        """False when the base URL is unset or the placeholder."""
        return is_configured_base_url(self.base_url)

    async def resolve(self) -> SettingsResolution:
        """
        Returns complete settings, whatever the state of n8n.

        Never raises on webhook failures.
        """
        if not self.configured:
            logger.warning("API_BASE_URL not configured, serving default settings")
            return SettingsResolution(
                settings=self.defaults,
                source="unconfigured",
                message=NOT_CONFIGURED_MESSAGE,
            )

        try:
            raw = await self.client.post(
                self.get_settings_url,
                {"action": "get_settings"},
                timeout=self.timeout,
            )
        except WebhookError as e:
            logger.warning(f"Settings webhook failed, serving default settings: {e.message}")
            return SettingsResolution(
                settings=self.defaults,
                source="degraded",
                message=f"Settings service unavailable ({e.message}), using default settings",
            )

        payload = ExternalSettingsPayload.from_response(raw)
        return SettingsResolution(
            settings=map_external_to_settings(payload, self.defaults),
            source="live",
        )


def validate_and_format(update: SettingsUpdateRequest) -> SheetRow:
    """
    Validates an update request and builds the sheet row.

    Checks, in order (first failure wins):
    1. required fields present and non-blank
    2. contactEmail shape
    3. whatsappLink / discordLink http(s) scheme
    4. coursePrice numeric and >= 0
    5. registrationDeadline strictly before the webinar date

    Raises:
        ValidationError: With the failing field(s) in details.
    """
    values = update.model_dump(by_alias=True)

    missing = [name for name in REQUIRED_UPDATE_FIELDS if is_blank(values[name])]
    if missing:
        raise ValidationError(
            f"Required fields: {', '.join(REQUIRED_UPDATE_FIELDS)}",
            details={"missing": missing},
        )

    if not is_simple_email(update.contact_email):
        raise ValidationError("Invalid email format", details={"field": "contactEmail"})

    for field, label in (("whatsappLink", "WhatsApp"), ("discordLink", "Discord")):
        if not is_http_url(values[field]):
            raise ValidationError(
                f"Invalid URL format for {label} link",
                details={"field": field},
            )

    price = parse_strict_float(update.course_price)
    if price is None or price < 0:
        raise ValidationError(
            "Registration fee must be a non-negative number",
            details={"field": "coursePrice"},
        )

    deadline = parse_calendar_date(update.registration_deadline)
    webinar_day = parse_calendar_date(update.webinar_time)
    if deadline is None or webinar_day is None:
        raise ValidationError(
            "Invalid date format",
            details={"field": "registrationDeadline" if deadline is None else "webinarTime"},
        )
    if deadline >= webinar_day:
        raise ValidationError(
            "Registration deadline must be before webinar date",
            details={"field": "registrationDeadline"},
        )

    password = update.admin_password if isinstance(update.admin_password, str) else None

    return SheetRow(
        admin_username=str(update.admin_username).strip(),
        admin_password=password if password and password.strip() else None,
        registration_fee=format_amount(price),
        registration_deadline=format_sheet_date(deadline),
        webinar_time=format_sheet_date(webinar_day),
        contact_email=update.contact_email,
        whatsapp_link=update.whatsapp_link,
        discord_link=update.discord_link,
    )


class SettingsService:
    """Reads and updates the settings through n8n."""

    def __init__(
        self,
        resolver: Optional[SettingsResolver] = None,
        client: Optional[WebhookClient] = None,
        update_settings_url: Optional[str] = None
    ):
        self.client = client or webhook_client
        self.resolver = resolver or SettingsResolver(client=self.client)
        self._update_settings_url = update_settings_url

    @property
    def update_settings_url(self) -> Optional[str]:
        """post-settings URL, None when n8n is not configured."""
        return self._update_settings_url or app_settings.update_settings_url

    async def get_settings(self) -> SettingsResolution:
        """Current settings (live, unconfigured or degraded)."""
        return await self.resolver.resolve()

    async def update_settings(self, update: SettingsUpdateRequest) -> tuple[SheetRow, Settings]:
        """
        Validates the update and sends it to n8n.

        Args:
            update: Admin update request.

        Returns:
            Tuple (sheet row sent, canonical settings echoed to the admin).

        Raises:
            ValidationError: Invalid request.
            ConfigurationError: No update webhook configured.
            WebhookError: n8n call failed or n8n answered success=false.
        """
        row = validate_and_format(update)

        url = self.update_settings_url
        if not url:
            raise ConfigurationError(
                "Settings update service not configured. Please contact administrator.",
                node="update_settings",
            )

        logger.info("Sending settings update to n8n")
        data = await self.client.post(
            url,
            {"sheet": "Admin", "action": "update_settings", "data": row.to_row()},
        )
        if isinstance(data, dict) and data.get("success") is False:
            raise WebhookError(
                message=data.get("message") or "Settings update rejected by n8n",
                url=url,
                details={"body": data},
            )
        logger.info("Settings updated in the Admin sheet")

        echoed = Settings(
            admin_username=row.admin_username,
            course_price=float(row.registration_fee),
            registration_deadline=parse_calendar_date(update.registration_deadline).isoformat(),
            webinar_time=str(update.webinar_time).strip(),
            contact_email=row.contact_email,
            whatsapp_link=row.whatsapp_link,
            discord_link=row.discord_link,
        )
        return row, echoed


# Global instances for direct import
settings_resolver = SettingsResolver()
settings_service = SettingsService(resolver=settings_resolver)
