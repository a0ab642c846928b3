"""
Webinar settings endpoints.

- GET /api/settings: public, never fails (live data or defaults)
- PUT /api/admin/settings: admin only, validated then written through n8n
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Header, Request

from app.core.error_handler import (
    FunnelError,
    ValidationError,
    WebhookError,
    error_handler,
)
from app.models.settings import (
    SettingsResponse,
    SettingsUpdateRequest,
    SettingsUpdateResponse,
)
from app.services.auth_service import verify_admin_authorization
from app.services.settings_service import settings_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["settings"])


@router.get(
    "/settings",
    response_model=SettingsResponse,
    summary="Current webinar settings",
    description="Reads the settings from n8n, or serves the defaults when n8n is unavailable."
)
async def get_settings():
    """
    Returns the settings used to render the funnel pages.

    Always answers 200 with success=true: webhook failures are absorbed
    into the default settings and explained in `message`.
    """
    resolution = await settings_service.get_settings()
    logger.info(f"Settings served from source={resolution.source}")

    return SettingsResponse(
        success=True,
        settings=resolution.settings.to_public_dict(),
        source=resolution.source,
        message=resolution.message,
    )


@router.put(
    "/admin/settings",
    response_model=SettingsUpdateResponse,
    summary="Update the webinar settings",
    description="Validates the settings and writes them to the Admin sheet through n8n.",
    responses={
        400: {"description": "Invalid settings"},
        401: {"description": "Missing or invalid token"},
        500: {"description": "Update could not be dispatched"},
        503: {"description": "Update service not configured"},
    }
)
async def update_settings(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization")
):
    """
    Updates the settings.

    Flow:
    1. Checks the admin token
    2. Validates the body (first failing check wins)
    3. Sends the sheet row to n8n

    Raises:
        AuthenticationError 401 / AuthorizationError 403: Token checks.
        ValidationError 400: Invalid body.
        FunnelError 500: n8n call failed.
    """
    claims = verify_admin_authorization(authorization)

    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Request body must be a JSON object")
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")

    update = SettingsUpdateRequest.model_validate(body)

    try:
        _, updated = await settings_service.update_settings(update)
    except WebhookError as e:
        error_handler.handle_error(e)
        raise FunnelError(
            message="Failed to update settings",
            workflow="settings",
            node="update_settings",
            details={"reason": e.message},
        )

    logger.info(f"Settings updated by {claims.get('username')}")
    return SettingsUpdateResponse(
        success=True,
        message="Settings updated successfully",
        settings=updated.to_public_dict(),
    )
