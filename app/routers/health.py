"""Health check endpoint.

Reports whether the ``applications`` table is reachable.  Returns 503 when
it is not, so the load balancer stops routing webhooks to a node that would
only be able to acknowledge them without storing anything.
"""

import logging
from typing import Any

from fastapi import APIRouter
from starlette.responses import JSONResponse

from app.core.constants import APPLICATIONS_TABLE
from app.db.supabase import get_supabase

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check() -> Any:
    """Return service status with a real Supabase connectivity test."""
    db_status = "disconnected"

    try:
        client = get_supabase()
        result = client.table(APPLICATIONS_TABLE).select("id").limit(1).execute()
        if result is not None:
            db_status = "connected"
    except Exception:
        logger.warning("Health check: Supabase connection failed", exc_info=True)

    payload: dict[str, str] = {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
    }

    if db_status != "connected":
        return JSONResponse(status_code=503, content=payload)

    return payload
