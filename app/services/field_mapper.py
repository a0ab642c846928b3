"""
Maps the n8n settings row onto the canonical settings.

Every field is read independently and falls back to its own default,
so a single malformed cell never blanks the rest of the row.
"""

from __future__ import annotations

import logging
from typing import Any

from app.models.settings import DEFAULT_SETTINGS, ExternalSettingsPayload, Settings
from app.utils.validators import parse_lenient_float, sheet_date_to_iso

logger = logging.getLogger(__name__)

# Clock time of the webinar; the sheet only stores the day
WEBINAR_CLOCK_TIME = "19:00"


def _text(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def map_course_price(value: Any, default: float) -> float:
    """Registration fee as float, default when unparseable or negative."""
    price = parse_lenient_float(value)
    return default if price is None or price < 0 else price


def map_sheet_date(value: Any, default: str) -> str:
    """DD-MM-YYYY cell to YYYY-MM-DD, default when empty or not text."""
    if not isinstance(value, str) or not value.strip():
        return default
    return sheet_date_to_iso(value.strip()) or default


def map_webinar_time(value: Any, default: str) -> str:
    """
    Webinar date-time built from the sheet date and the fixed clock time.

    Any time written in the cell is ignored.
    """
    if not isinstance(value, str):
        return default
    mapped = sheet_date_to_iso(value.strip())
    if not mapped:
        return default
    return f"{mapped}T{WEBINAR_CLOCK_TIME}"


def map_external_to_settings(
    payload: ExternalSettingsPayload,
    defaults: Settings = DEFAULT_SETTINGS
) -> Settings:
    """
    Converts the n8n payload into canonical settings.

    Args:
        payload: Label-keyed row from the settings webhook.
        defaults: Values used for missing or malformed fields.

    Returns:
        Complete settings. Never raises on bad payload data.
    """
    settings = Settings(
        admin_username=_text(payload.admin_username, defaults.admin_username),
        admin_password=_text(payload.admin_password, defaults.admin_password or ""),
        course_price=map_course_price(payload.registration_fee, defaults.course_price),
        registration_deadline=map_sheet_date(
            payload.registration_deadline, defaults.registration_deadline
        ),
        webinar_time=map_webinar_time(payload.webinar_time, defaults.webinar_time),
        contact_email=_text(payload.contact_email, defaults.contact_email),
        whatsapp_link=_text(payload.whatsapp_link, defaults.whatsapp_link),
        discord_link=_text(payload.discord_link, defaults.discord_link),
    )

    missing = [
        name for name, value in payload.model_dump().items()
        if value is None and name != "admin_password"
    ]
    if missing:
        logger.warning(f"Settings row incomplete, defaults used for: {', '.join(missing)}")

    return settings
