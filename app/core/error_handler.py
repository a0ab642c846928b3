"""
Centralized error handling for the Webinar Funnel API.

- Exception hierarchy shared by services and routes
- Consistent logging of every handled error
- JSON formatting of errors for FastAPI
"""

from __future__ import annotations

import logging
import traceback
from datetime import datetime, timezone
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.core.config import settings

logger = logging.getLogger(__name__)


class FunnelError(Exception):
    """Base exception of the application."""

    def __init__(
        self,
        message: str,
        workflow: str = "unknown",
        node: str = "unknown",
        details: dict | None = None,
        status_code: int = 500
    ):
        self.message = message
        self.workflow = workflow
        self.node = node
        self.details = details or {}
        self.status_code = status_code
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)


class ValidationError(FunnelError):
    """Malformed request data."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(
            message=message,
            workflow="validation",
            node="input_validation",
            details=details,
            status_code=400
        )


class ConfigurationError(FunnelError):
    """The external workflow service is not set up."""

    def __init__(self, message: str, node: str = "config"):
        super().__init__(
            message=message,
            workflow="configuration",
            node=node,
            status_code=503
        )


class AuthenticationError(FunnelError):
    """Missing, invalid or expired admin token / credentials."""

    def __init__(self, message: str = "Access token required"):
        super().__init__(
            message=message,
            workflow="authentication",
            node="admin_token_check",
            status_code=401
        )


class AuthorizationError(FunnelError):
    """Authenticated, but not an admin."""

    def __init__(self, message: str = "Admin access required"):
        super().__init__(
            message=message,
            workflow="authentication",
            node="admin_role_check",
            status_code=403
        )


class WebhookError(FunnelError):
    """Failure of an outbound call to the workflow automation service."""

    def __init__(
        self,
        message: str,
        url: str,
        details: dict | None = None
    ):
        self.url = url
        super().__init__(
            message=message,
            workflow="external_service",
            node="n8n_webhook",
            details={"url": url, **(details or {})},
            status_code=502
        )


class WebhookTimeoutError(WebhookError):
    """No response within the timeout."""

    def __init__(self, url: str, timeout: float):
        self.timeout = timeout
        super().__init__(
            message=f"Webhook timed out after {timeout:g}s",
            url=url,
            details={"timeout": timeout}
        )


class WebhookNetworkError(WebhookError):
    """The connection could not be established."""

    def __init__(self, url: str, reason: str):
        super().__init__(
            message=f"Webhook unreachable: {reason}",
            url=url,
            details={"reason": reason}
        )


class WebhookRemoteError(WebhookError):
    """The remote answered with a non-2xx status."""

    def __init__(self, url: str, status: int, body: Any = None):
        self.status = status
        self.body = body
        super().__init__(
            message=f"Webhook returned HTTP {status}",
            url=url,
            details={"status": status, "body": body}
        )


class WebhookResponseError(WebhookError):
    """The remote answered 2xx with a body that is not JSON."""

    def __init__(self, url: str, body: str):
        self.body = body
        super().__init__(
            message="Webhook returned a non-JSON body",
            url=url,
            details={"body": body[:200]}
        )


class ErrorHandler:
    """Logs errors and normalizes them into a dictionary."""

    def handle_error(
        self,
        error: Exception,
        workflow: str = "unknown",
        node: str = "unknown"
    ) -> dict:
        """
        Handles an error in a centralized way.

        Args:
            error: The caught exception.
            workflow: Name of the flow where the error happened.
            node: Name of the function/step.

        Returns:
            Dictionary describing the logged error.
        """
        if isinstance(error, FunnelError):
            error_data = {
                "workflow": error.workflow,
                "node": error.node,
                "message": error.message,
                "details": error.details,
                "status_code": error.status_code,
                "timestamp": error.timestamp
            }
        else:
            error_data = {
                "workflow": workflow,
                "node": node,
                "message": str(error),
                "details": {
                    "type": type(error).__name__,
                    "traceback": traceback.format_exc()
                },
                "status_code": 500,
                "timestamp": datetime.now(timezone.utc).isoformat()
            }

        log = logger.error if error_data["status_code"] >= 500 else logger.warning
        log(
            f"[{error_data['workflow']}:{error_data['node']}] "
            f"{error_data['message']}"
        )

        return error_data


# Global instance
error_handler = ErrorHandler()


def public_message(exc: Exception, fallback: str = "Internal server error") -> str:
    """Hides unexpected error messages outside development."""
    if settings.is_development:
        return str(exc) or fallback
    return fallback


async def global_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Global FastAPI handler.

    Catches every unhandled exception and renders it as JSON.
    """
    if isinstance(exc, FunnelError):
        error_handler.handle_error(exc)
        content = {
            "success": False,
            "message": exc.message,
            "timestamp": exc.timestamp
        }
        if isinstance(exc, ValidationError) and exc.details:
            content["details"] = exc.details
        return JSONResponse(status_code=exc.status_code, content=content)

    if isinstance(exc, HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "message": exc.detail,
                "timestamp": datetime.now(timezone.utc).isoformat()
            }
        )

    if isinstance(exc, RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "message": "Validation failed",
                "details": [
                    {"field": ".".join(str(p) for p in err["loc"][1:]), "message": err["msg"]}
                    for err in exc.errors()
                ],
                "timestamp": datetime.now(timezone.utc).isoformat()
            }
        )

    # Unexpected error
    error_data = error_handler.handle_error(
        exc,
        workflow="unhandled",
        node="global_handler"
    )

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": public_message(exc),
            "timestamp": error_data["timestamp"]
        }
    )
