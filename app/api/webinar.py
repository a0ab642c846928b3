"""
Public webinar information.

- GET /api/webinar-info: webinar summary for the landing page
- GET /api/config/constants: display constants and default settings
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi import APIRouter

from app.core.config import settings
from app.models.settings import DEFAULT_SETTINGS

router = APIRouter(prefix="/api", tags=["webinar"])

WEBINAR_TITLE = "Python Full Stack in 5 Days"

WEBINAR_TOPICS = [
    "Python Basics to Advanced",
    "Flask Backend Development",
    "React Frontend Integration",
    "Connecting APIs",
    "Deploying Apps in 5 Days",
    "Live Hands-on Learning",
]

COURSE_FEATURES = [
    "Complete 5-day Python Full Stack webinar",
    "Lifetime access to all recordings",
    "Downloadable code templates and projects",
    "Private WhatsApp community access",
    "1-on-1 mentorship session (30 minutes)",
    "Certificate of completion",
]


def next_webinar_date(now: datetime | None = None) -> datetime:
    """Seven days from now, at 19:00 UTC."""
    now = now or datetime.now(timezone.utc)
    return (now + timedelta(days=7)).replace(hour=19, minute=0, second=0, microsecond=0)


@router.get("/webinar-info", summary="Webinar summary")
async def get_webinar_info():
    """Static webinar summary."""
    return {
        "success": True,
        "data": {
            "title": WEBINAR_TITLE,
            "date": next_webinar_date().isoformat(),
            "duration": "2 hours",
            "instructor": "Expert Python Developer",
            "topics": WEBINAR_TOPICS,
            "timezone": "UTC",
        },
    }


@router.get("/config/constants", summary="Display constants")
async def get_app_constants():
    """Currency, UI timings and the default settings values."""
    return {
        "success": True,
        "constants": {
            "CURRENCY_SYMBOL": settings.currency_symbol,
            "CURRENCY": settings.currency,
            "TOAST_DURATION": 4000,
            "NAVIGATION_DELAY": 1500,
            "DEFAULT_COURSE_PRICE": DEFAULT_SETTINGS.course_price,
            "DEFAULT_REGISTRATION_DEADLINE": DEFAULT_SETTINGS.registration_deadline,
            "DEFAULT_WEBINAR_TIME": DEFAULT_SETTINGS.webinar_time,
            "DEFAULT_CONTACT_EMAIL": DEFAULT_SETTINGS.contact_email,
            "DEFAULT_WHATSAPP_LINK": DEFAULT_SETTINGS.whatsapp_link,
            "DEFAULT_DISCORD_LINK": DEFAULT_SETTINGS.discord_link,
            "DEFAULT_ADMIN_USERNAME": DEFAULT_SETTINGS.admin_username,
            "DEFAULT_COURSE_FEATURES": COURSE_FEATURES,
        },
    }
