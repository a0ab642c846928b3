"""
Pydantic models for lead capture.

Defines the schemas for:
- The contact form payload sent by the frontend
- The record forwarded to n8n
- The API response
"""

from __future__ import annotations

from typing import Optional, Literal

from pydantic import (
    BaseModel,
    Field,
    EmailStr,
    field_validator,
    ConfigDict,
)

from app.utils.validators import normalize_email_address, sanitize_string


# === Payload from the contact page ===
class ContactFormPayload(BaseModel):
    """Contact form submitted from the landing page."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=100, description="Full name")
    email: EmailStr = Field(..., description="Email address")
    mobile: Optional[str] = Field(default=None, max_length=20, description="Mobile number")
    query: str = Field(..., min_length=10, max_length=1000, description="Question")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Lower-cases the email."""
        return normalize_email_address(v)

    @field_validator("query")
    @classmethod
    def clean_query(cls, v: str) -> str:
        """Removes control characters and repeated whitespace."""
        return sanitize_string(v, max_length=1000)

    def to_webhook_record(self, query_timestamp: str, ip_address: Optional[str]) -> "ContactRecord":
        """Builds the record sent to the contact-form webhook."""
        return ContactRecord(
            query=self.query,
            name=self.name,
            email=self.email,
            mobile=self.mobile or "NA",
            query_timestamp=query_timestamp,
            ip_address=ip_address,
        )


class ContactRecord(BaseModel):
    """Row appended to the queries sheet by n8n."""

    query: str
    name: str
    email: str
    mobile: str = "NA"
    type: Literal["contact_form"] = "contact_form"
    query_timestamp: str
    ip_address: Optional[str] = None


# === API response ===
class ContactResponse(BaseModel):
    """Response after a contact form submission."""

    success: bool = True
    message: str = "Thank you for your message. We will get back to you soon!"
    data: dict
