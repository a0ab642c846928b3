"""
Main entry point of the Webinar Funnel API.

FastAPI application with:
- Settings, admin, lead capture and checkout endpoints
- Request logging middleware
- Global error handling
- OpenAPI documentation (debug only)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.error_handler import global_exception_handler, FunnelError

# Logging configuration
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the startup configuration and the shutdown.
    """
    logger.info(f"🚀 Starting {settings.app_name} in {settings.app_env} mode")
    logger.info(f"API available on {settings.api_host}:{settings.api_port}")

    if settings.webhook_configured:
        logger.info(f"n8n webhooks: {settings.api_base_url}")
    else:
        logger.warning("API_BASE_URL not configured: default settings will be served")

    yield

    logger.info(f"Stopping {settings.app_name}")


# FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="""
    ## Webinar Funnel API

    Backend of the webinar sales funnel. Business actions are forwarded to
    n8n webhooks; reads fall back to default settings when n8n is unavailable.

    ### Endpoints:
    - **Settings**: public read, admin update
    - **Admin**: login, token refresh and verification
    - **Leads**: contact form
    - **Checkout**: payment simulation, coupon validation

    ### Authentication:
    Admin endpoints need an `Authorization: Bearer <token>` header.
    """,
    version=APP_VERSION,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url] if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Logs every incoming request."""
    start_time = datetime.now(timezone.utc)

    logger.info(
        f"📥 {request.method} {request.url.path} "
        f"from {request.client.host if request.client else 'unknown'}"
    )

    response = await call_next(request)

    process_time = (datetime.now(timezone.utc) - start_time).total_seconds()

    logger.info(
        f"📤 {request.method} {request.url.path} "
        f"- {response.status_code} ({process_time:.3f}s)"
    )

    response.headers["X-Process-Time"] = str(process_time)

    return response


# Exception handlers
@app.exception_handler(FunnelError)
async def funnel_exception_handler(request: Request, exc: FunnelError):
    """Handler for application errors."""
    return await global_exception_handler(request, exc)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handler for HTTP errors (404, 405, explicit HTTPException)."""
    return await global_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Handler for invalid request bodies (answered with 400)."""
    return await global_exception_handler(request, exc)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Handler for every other exception."""
    return await global_exception_handler(request, exc)


# === Base routes ===

@app.get("/", tags=["health"])
async def root():
    """API home page."""
    return {
        "name": settings.app_name,
        "version": APP_VERSION,
        "status": "running",
        "environment": settings.app_env,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.

    Does not call n8n: the settings endpoint already degrades on its own.
    """
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "n8n": "configured" if settings.webhook_configured else "not configured"
        }
    }


# === Routers ===

from app.api.settings import router as settings_router
from app.api.admin import router as admin_router
from app.api.leads import router as leads_router
from app.api.payments import router as payments_router
from app.api.webinar import router as webinar_router

app.include_router(settings_router)
app.include_router(admin_router)
app.include_router(leads_router)
app.include_router(payments_router)
app.include_router(webinar_router)


# === Entry point for uvicorn ===

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )
