"""
Admin authentication endpoints.

- POST /api/admin/login: credentials checked by n8n, returns a signed token
- POST /api/admin/refresh-token: new token for a valid one
- GET /api/admin/verify: checks a token
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Header

from app.core.config import settings
from app.core.error_handler import AuthenticationError
from app.models.admin import AdminLoginRequest, AdminTokenResponse, AdminUser
from app.services.auth_service import (
    ADMIN_ROLE,
    admin_auth_service,
    token_service,
    verify_admin_authorization,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post(
    "/login",
    response_model=AdminTokenResponse,
    summary="Admin login",
    responses={401: {"description": "Invalid credentials"}}
)
async def login_admin(payload: AdminLoginRequest):
    """
    Logs an admin in.

    A failed attempt is answered after a short delay to slow down
    credential guessing.
    """
    logger.info(f"🔐 Admin login attempt for username: {payload.username}")

    valid, message = await admin_auth_service.validate_credentials(
        payload.username, payload.password
    )
    if not valid:
        await asyncio.sleep(settings.failed_login_delay)
        logger.warning("❌ Admin login failed")
        raise AuthenticationError(message or "Invalid username or password")

    logger.info("✅ Admin login successful")
    return AdminTokenResponse(
        message="Login successful",
        token=token_service.issue(payload.username, ADMIN_ROLE),
        user=AdminUser(username=payload.username, role=ADMIN_ROLE),
    )


@router.post(
    "/refresh-token",
    response_model=AdminTokenResponse,
    summary="Refresh an admin token"
)
async def refresh_token(
    authorization: Optional[str] = Header(None, alias="Authorization")
):
    """Issues a fresh token for the admin carried by a valid token."""
    claims = verify_admin_authorization(authorization)
    return AdminTokenResponse(
        message="Token refreshed successfully",
        token=token_service.refresh(claims),
        user=AdminUser(username=claims["username"], role=claims["role"]),
    )


@router.get("/verify", summary="Verify an admin token")
async def verify_token(
    authorization: Optional[str] = Header(None, alias="Authorization")
):
    """Returns the admin identity of a valid token."""
    claims = verify_admin_authorization(authorization)
    return {
        "success": True,
        "user": {"username": claims["username"], "role": claims["role"]},
        "expires_at": claims["exp"],
    }
