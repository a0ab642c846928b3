"""
Pydantic models for the webinar settings.

Defines the schemas for:
- Canonical settings (camelCase on the wire)
- The label-keyed payload returned by the n8n settings webhook
- The admin update request
- The sheet row sent back to n8n
- API responses
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# === Canonical settings ===
class Settings(BaseModel):
    """
    Canonical webinar settings served to the frontend.

    Materialized fresh on every request, never persisted or cached.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    admin_username: str = Field(..., description="Admin username")
    admin_password: Optional[str] = Field(default=None, description="Admin password")
    course_price: float = Field(..., description="Registration fee")
    registration_deadline: str = Field(..., description="YYYY-MM-DD")
    webinar_time: str = Field(..., description="YYYY-MM-DDTHH:MM")
    contact_email: str
    whatsapp_link: str
    discord_link: str

    def to_public_dict(self) -> dict:
        """camelCase dictionary for the API, without the admin password."""
        return self.model_dump(by_alias=True, exclude={"admin_password"})


# Hard-coded fallback, injected into the resolver rather than mutated globally
DEFAULT_SETTINGS = Settings(
    admin_username="admin",
    admin_password="admin",
    course_price=4999,
    registration_deadline="2025-11-07",
    webinar_time="2025-11-08T19:00",
    contact_email="webinar@pystack.com",
    whatsapp_link="www.google.com",
    discord_link="www.discord.com",
)


# === Payload from the n8n settings webhook ===
class ExternalSettingsPayload(BaseModel):
    """
    Settings row as returned by n8n (keys mirror the sheet headers).

    Nothing is enforced upstream: every field is optional and untyped,
    and is only ever read through the field mapper.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    admin_username: Any = Field(default=None, alias="Admin Username")
    admin_password: Any = Field(default=None, alias="Admin Password")
    registration_fee: Any = Field(default=None, alias="Registration Fee")
    registration_deadline: Any = Field(default=None, alias="Registration Deadline")
    webinar_time: Any = Field(default=None, alias="Webinar Time")
    contact_email: Any = Field(default=None, alias="Contact Email")
    whatsapp_link: Any = Field(default=None, alias="Whatsapp Invite Link")
    discord_link: Any = Field(default=None, alias="Discord Community Link")

    @classmethod
    def from_response(cls, data: Any) -> "ExternalSettingsPayload":
        """
        Builds the payload from a raw webhook response.

        n8n may answer with the row itself, a list of rows or a
        {"settings": {...}} envelope. Anything else gives an empty payload.
        """
        if isinstance(data, list):
            data = next((item for item in data if isinstance(item, dict)), {})
        if isinstance(data, dict) and isinstance(data.get("settings"), dict):
            data = data["settings"]
        if not isinstance(data, dict):
            return cls()
        return cls.model_validate(data)


# === Admin update request ===
class SettingsUpdateRequest(BaseModel):
    """
    Body of PUT /api/admin/settings.

    Deliberately permissive: checks run in a fixed order in the
    settings service so that the first failure wins.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    admin_username: Any = None
    admin_password: Any = None
    course_price: Any = None
    registration_deadline: Any = None
    webinar_time: Any = None
    contact_email: Any = None
    whatsapp_link: Any = None
    discord_link: Any = None


# === Row sent to the n8n update webhook ===
class SheetRow(BaseModel):
    """Label-keyed row matching the "Admin" sheet headers."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    admin_username: str = Field(..., serialization_alias="Admin Username")
    admin_password: Optional[str] = Field(default=None, serialization_alias="Admin Password")
    registration_fee: float | int = Field(..., serialization_alias="Registration Fee")
    registration_deadline: str = Field(..., serialization_alias="Registration Deadline")
    webinar_time: str = Field(..., serialization_alias="Webinar Time")
    contact_email: str = Field(..., serialization_alias="Contact Email")
    whatsapp_link: str = Field(..., serialization_alias="Whatsapp Invite Link")
    discord_link: str = Field(..., serialization_alias="Discord Community Link")

    def to_row(self) -> dict:
        """Label-keyed dictionary; "Admin Password" is left out when not set."""
        return self.model_dump(by_alias=True, exclude_none=True)


# === API responses ===
SettingsSource = Literal["live", "unconfigured", "degraded"]


class SettingsResponse(BaseModel):
    """Response of GET /api/settings."""

    success: bool = True
    settings: dict
    source: SettingsSource
    message: Optional[str] = None


class SettingsUpdateResponse(BaseModel):
    """Response of PUT /api/admin/settings."""

    success: bool = True
    message: str = "Settings updated successfully"
    settings: dict
