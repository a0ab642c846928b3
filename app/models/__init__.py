"""
Pydantic models of the Webinar Funnel API.

Modules:
- settings: canonical settings, n8n payload, update request, sheet row
- admin: admin login and tokens
- lead: contact form
- payment: payment simulation and coupons
"""

from app.models.settings import (
    DEFAULT_SETTINGS,
    ExternalSettingsPayload,
    Settings,
    SettingsUpdateRequest,
    SheetRow,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "ExternalSettingsPayload",
    "Settings",
    "SettingsUpdateRequest",
    "SheetRow",
]
