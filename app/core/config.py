"""
Centralized configuration for the Webinar Funnel API.

Uses Pydantic Settings for strict validation of environment variables.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Value shipped in sample .env files; treated the same as an unset base URL
API_BASE_URL_PLACEHOLDER = "API_URL"


class Settings(BaseSettings):
    """
    Application configuration.

    Every variable is loaded from the environment or from a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === API Settings ===
    app_name: str = Field(default="Webinar Funnel API", description="Application name")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Runtime environment"
    )
    debug: bool = Field(default=False, description="Debug mode")
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=5000, ge=1, le=65535, description="API port")
    frontend_url: str = Field(
        default="http://localhost:3000",
        description="Frontend origin allowed by CORS"
    )

    # === Workflow automation webhooks (n8n) ===
    api_base_url: str = Field(
        default="",
        description="Base URL of the n8n webhooks"
    )
    n8n_get_settings_webhook: str = Field(
        default="",
        description="Override for the settings read webhook"
    )
    n8n_update_settings_webhook: str = Field(
        default="",
        description="Override for the settings update webhook base"
    )
    webhook_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for outbound webhook calls"
    )
    coupon_timeout: float = Field(
        default=15.0,
        gt=0,
        description="Timeout in seconds for coupon validation"
    )

    # === Admin auth ===
    jwt_secret: str = Field(
        default="",
        description="Secret used to sign admin tokens"
    )
    admin_token_ttl_hours: int = Field(
        default=24,
        ge=1,
        le=24 * 30,
        description="Admin token lifetime in hours"
    )
    failed_login_delay: float = Field(
        default=1.0,
        ge=0,
        description="Delay in seconds before answering a failed admin login"
    )

    # === Display ===
    currency: str = Field(default="INR", description="Currency code")
    currency_symbol: str = Field(default="₹", description="Currency symbol")

    @field_validator(
        "api_base_url",
        "n8n_get_settings_webhook",
        "n8n_update_settings_webhook",
        "frontend_url",
    )
    @classmethod
    def validate_urls(cls, v: str) -> str:
        """Strips whitespace and the trailing slash."""
        return v.strip().rstrip("/")

    @model_validator(mode="after")
    def require_secret_in_production(self) -> "Settings":
        """JWT_SECRET must be set in production."""
        if self.app_env == "production" and not self.jwt_secret:
            raise ValueError("JWT_SECRET must be set in production")
        return self

    @property
    def is_production(self) -> bool:
        """True when running in production."""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """True when running in development."""
        return self.app_env == "development"

    @property
    def webhook_configured(self) -> bool:
        """True when the n8n base URL is set to a real value."""
        return is_configured_base_url(self.api_base_url)

    @property
    def get_settings_url(self) -> str:
        """URL of the settings read webhook."""
        return self.n8n_get_settings_webhook or f"{self.api_base_url}/get-settings"

    @property
    def update_settings_url(self) -> str | None:
        """URL of the settings update webhook, None when nothing is configured."""
        base = self.n8n_update_settings_webhook or self.api_base_url
        if not is_configured_base_url(base):
            return None
        return f"{base}/post-settings"


def is_configured_base_url(base_url: str | None) -> bool:
    """A base URL counts as configured unless it is empty or the placeholder."""
    return bool(base_url) and base_url != API_BASE_URL_PLACEHOLDER


@lru_cache
def get_settings() -> Settings:
    """
    Returns the singleton settings instance.

    lru_cache avoids reloading the environment on every call.
    """
    return Settings()


# Global instance for direct import
settings = get_settings()
