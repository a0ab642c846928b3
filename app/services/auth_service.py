"""
Admin authentication service.

- Credential check delegated to the n8n admin-auth webhook
- HMAC-SHA256 signed admin tokens with an expiry
- Bearer token verification for the protected routes

Tokens are not JWTs: base64url(JSON claims) + "." + hex signature, keyed
with JWT_SECRET (the variable name the deployments already set).
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Optional

from app.core.config import settings, is_configured_base_url
from app.core.error_handler import (
    AuthenticationError,
    AuthorizationError,
    WebhookError,
)
from app.services.webhook_client import WebhookClient, webhook_client

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"

# Development-only secret, refused in production by the config validator
_DEV_FALLBACK_SECRET = "dev-only-admin-token-secret-change-me"


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


class AdminTokenService:
    """
    Issues and verifies signed admin tokens.

    Token format: base64url(JSON claims) + "." + hex HMAC-SHA256 signature.
    """

    def __init__(self, secret: str | None = None, ttl_hours: int | None = None):
        """
        Initializes the token service.

        Args:
            secret: Signing secret. Uses JWT_SECRET by default.
            ttl_hours: Token lifetime. Uses ADMIN_TOKEN_TTL_HOURS by default.
        """
        if not (secret or settings.jwt_secret):
            logger.warning("⚠️ JWT_SECRET not set, using the development fallback secret")
        self._secret = (secret or settings.jwt_secret or _DEV_FALLBACK_SECRET).encode("utf-8")
        self.ttl_seconds = (ttl_hours or settings.admin_token_ttl_hours) * 3600

    def sign(self, data: str) -> str:
        """HMAC-SHA256 hex signature of data."""
        return hmac.new(
            self._secret,
            data.encode("utf-8"),
            hashlib.sha256
        ).hexdigest()

    def issue(self, username: str, role: str = ADMIN_ROLE, now: float | None = None) -> str:
        """
        Issues a signed token.

        Args:
            username: Admin username.
            role: Role claim.
            now: Issue time (epoch seconds), current time by default.

        Returns:
            Signed token.
        """
        issued_at = int(now if now is not None else time.time())
        claims = {
            "username": username,
            "role": role,
            "iat": issued_at,
            "exp": issued_at + self.ttl_seconds,
        }
        body = _b64encode(json.dumps(claims, separators=(",", ":")).encode("utf-8"))
        return f"{body}.{self.sign(body)}"

    def decode(self, token: str, now: float | None = None) -> dict:
        """
        Verifies a token and returns its claims.

        The signature is compared in constant time.

        Raises:
            AuthenticationError: Malformed, tampered or expired token.
        """
        body, _, signature = token.partition(".")
        if not body or not signature or not secrets.compare_digest(
            self.sign(body).encode("utf-8"), signature.encode("utf-8")
        ):
            raise AuthenticationError("Invalid token")

        try:
            claims = json.loads(_b64decode(body))
        except ValueError as e:
            raise AuthenticationError("Invalid token") from e
        if not isinstance(claims, dict):
            raise AuthenticationError("Invalid token")

        current = now if now is not None else time.time()
        if not isinstance(claims.get("exp"), (int, float)) or claims["exp"] <= current:
            raise AuthenticationError("Token expired")

        return claims

    def refresh(self, claims: dict) -> str:
        """New token for the same username and role."""
        return self.issue(claims["username"], claims.get("role", ADMIN_ROLE))


class AdminAuthService:
    """Validates admin credentials with n8n."""

    def __init__(
        self,
        client: Optional[WebhookClient] = None,
        base_url: Optional[str] = None
    ):
        self.client = client or webhook_client
        self.base_url = settings.api_base_url if base_url is None else base_url.rstrip("/")

    async def validate_credentials(self, username: str, password: str) -> tuple[bool, str]:
        """
        Asks n8n whether the credentials are valid.

        n8n answers {valid: bool, message: str}. Any failure of the
        service counts as invalid credentials.

        Returns:
            Tuple (valid, message).
        """
        if not is_configured_base_url(self.base_url):
            logger.error("API_BASE_URL not configured, admin login unavailable")
            return False, "Authentication service unavailable"

        payload = {
            "username": username,
            "password": password,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "source": "admin-login",
            "action": "validate_credentials",
        }

        logger.info("🔐 Validating admin credentials with n8n")
        try:
            data = await self.client.post(f"{self.base_url}/admin-auth", payload)
        except WebhookError as e:
            logger.error(f"❌ n8n credential validation error: {e.message}")
            return False, "Authentication service unavailable"

        if isinstance(data, dict) and data.get("valid") is True:
            return True, "Login successful"
        message = data.get("message") if isinstance(data, dict) else None
        return False, message or "Invalid credentials"


# Global instances for direct import
token_service = AdminTokenService()
admin_auth_service = AdminAuthService()


def verify_admin_authorization(
    authorization: str | None,
    service: AdminTokenService | None = None
) -> dict:
    """
    Checks a "Bearer <token>" Authorization header.

    Args:
        authorization: Raw header value.
        service: Token service, the global one by default.

    Returns:
        Token claims.

    Raises:
        AuthenticationError: Missing, invalid or expired token.
        AuthorizationError: Token without the admin role.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError("Access token required")

    claims = (service or token_service).decode(authorization[len("Bearer "):].strip())
    if claims.get("role") != ADMIN_ROLE:
        raise AuthorizationError()
    return claims
