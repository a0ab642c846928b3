"""
Core components of the Webinar Funnel API.

Modules:
- config: Pydantic Settings configuration
- error_handler: exception hierarchy and centralized error handling
"""

from app.core.config import settings, get_settings

__all__ = ["settings", "get_settings"]
