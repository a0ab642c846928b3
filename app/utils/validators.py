"""
Validation and normalization helpers for the Webinar Funnel API.

Reusable functions for incoming data and for the n8n sheet formats.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Optional, Any


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
HTTP_URL_PATTERN = re.compile(r"^https?://.+")

# Leading number, as accepted by a lenient float parse ("4999 INR" -> 4999)
_LEADING_FLOAT = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def is_blank(value: Any) -> bool:
    """
    True for None, empty or whitespace-only strings.

    Numbers (0 included) are never blank.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def is_simple_email(value: Any) -> bool:
    """
    Checks the simple local@domain.tld shape.

    Examples:
        >>> is_simple_email("webinar@pystack.com")
        True
        >>> is_simple_email("webinar@pystack")
        False
    """
    return isinstance(value, str) and bool(EMAIL_PATTERN.match(value))


def is_http_url(value: Any) -> bool:
    """True for strings starting with http:// or https://."""
    return isinstance(value, str) and bool(HTTP_URL_PATTERN.match(value))


def normalize_email_address(email: str) -> str:
    """
    Normalizes an email address.

    Args:
        email: Raw email address.

    Returns:
        Lower-cased, trimmed email.
    """
    return email.strip().lower() if email else ""


def parse_lenient_float(value: Any) -> Optional[float]:
    """
    Parses a number the way a lenient float parse does.

    Numbers pass through, strings are read up to the first non-numeric
    character. Booleans, NaN, infinities and anything unparseable give None.

    Examples:
        >>> parse_lenient_float("4999")
        4999.0
        >>> parse_lenient_float("1499.50 INR")
        1499.5
        >>> parse_lenient_float("free") is None
        True
    """
    if isinstance(value, bool) or value is None:
        return None

    if isinstance(value, (int, float)):
        num = float(value)
    elif isinstance(value, str):
        match = _LEADING_FLOAT.match(value)
        if not match:
            return None
        num = float(match.group(0))
    else:
        return None

    return num if math.isfinite(num) else None


def parse_strict_float(value: Any) -> Optional[float]:
    """
    Parses a whole value as a finite number.

    Unlike parse_lenient_float, trailing garbage is rejected.
    """
    if isinstance(value, bool) or value is None:
        return None
    try:
        num = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, TypeError):
        return None
    return num if math.isfinite(num) else None


def sheet_date_to_iso(value: Any) -> Any:
    """
    Converts a sheet date DD-MM-YYYY into YYYY-MM-DD.

    Splits on "-" and reverses the three parts. Components are not
    checked, and anything that does not split into exactly three parts
    is returned unchanged.

    Examples:
        >>> sheet_date_to_iso("07-11-2025")
        '2025-11-07'
        >>> sheet_date_to_iso("07/11/2025")
        '07/11/2025'
    """
    if not isinstance(value, str):
        return value

    parts = value.split("-")
    if len(parts) != 3:
        return value
    return "-".join(reversed(parts))


def parse_calendar_date(value: Any) -> Optional[date]:
    """
    Reads the calendar date of an ISO date or date-time string.

    Args:
        value: "YYYY-MM-DD", "YYYY-MM-DDTHH:MM" and other ISO variants.

    Returns:
        The date part, or None when unparseable.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def format_sheet_date(value: date) -> str:
    """
    Formats a date as DD-MM-YYYY for the sheet.

    Examples:
        >>> format_sheet_date(date(2025, 11, 7))
        '07-11-2025'
    """
    return f"{value.day:02d}-{value.month:02d}-{value.year:04d}"


def sanitize_string(value: str, max_length: int = 500) -> str:
    """
    Cleans and truncates a string.

    Args:
        value: String to clean.
        max_length: Maximum length.

    Returns:
        Cleaned, truncated string.
    """
    if not value:
        return ""

    # Control characters
    cleaned = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", value)

    cleaned = " ".join(cleaned.split())

    return cleaned[:max_length] if len(cleaned) > max_length else cleaned


def format_amount(amount: float | int) -> float | int:
    """Integral amounts as int (4999.0 -> 4999), others unchanged."""
    if isinstance(amount, float) and amount.is_integer():
        return int(amount)
    return amount
