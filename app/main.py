"""FastAPI application entry point.

Configures logging, lifespan events, and router registration.  No CORS
middleware is installed: Indeed calls server to server, and a preflight
``OPTIONS`` must reach the webhook route to be answered and audited.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from app.core.config import settings
from app.core.logging import setup_logging
from app.routers import health, webhook

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: startup and shutdown hooks."""
    setup_logging()
    logger.info(
        "Application starting up",
        extra={
            "webhook_path": settings.WEBHOOK_PATH,
            "signature_secret_configured": bool(settings.INDEED_APPLY_API_SECRET),
            "signature_required": settings.INDEED_APPLY_REQUIRE_SIGNATURE,
        },
    )
    if settings.INDEED_APPLY_REQUIRE_SIGNATURE and not settings.INDEED_APPLY_API_SECRET:
        logger.warning(
            "Signature enforcement is on but no API secret is set; "
            "every request will be accepted unsigned"
        )
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="Indeed Apply Webhook",
    description="Receives Indeed Apply job applications and stores them with a full audit trail",
    version="0.1.0",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Router Registration
# ---------------------------------------------------------------------------
app.include_router(health.router, tags=["Health"])
app.include_router(webhook.router, tags=["Webhook"])
