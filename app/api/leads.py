"""
Lead capture endpoint.

- POST /api/contact: contact form forwarded to n8n
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, HTTPException

from app.core.error_handler import WebhookError, error_handler
from app.models.lead import ContactFormPayload, ContactResponse
from app.services.lead_service import lead_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["leads"])


def client_ip(request: Request) -> str | None:
    """Client IP, proxy headers first."""
    return (
        request.headers.get("x-real-ip")
        or request.headers.get("x-forwarded-for")
        or (request.client.host if request.client else None)
    )


@router.post(
    "/contact",
    response_model=ContactResponse,
    summary="Contact form submission",
    responses={503: {"description": "Contact service unavailable"}}
)
async def submit_contact(payload: ContactFormPayload, request: Request):
    """
    Records a question from the contact page.

    Raises:
        HTTPException 503: n8n configured but unreachable.
    """
    try:
        result = await lead_service.submit_contact(payload, ip_address=client_ip(request))
    except WebhookError as e:
        error_handler.handle_error(e)
        raise HTTPException(
            status_code=503,
            detail="Contact form service temporarily unavailable. Please try again later."
        )

    return ContactResponse(
        success=True,
        message=result["message"],
        data={
            "ticket_id": result["ticket_id"],
            "query_timestamp": result["query_timestamp"],
        },
    )
