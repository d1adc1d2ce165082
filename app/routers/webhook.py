"""Indeed Apply webhook endpoint.

The route is registered without a method list, so every HTTP method
(including ``OPTIONS`` preflights and WebDAV verbs) reaches the pipeline and
is answered and audited with a 405 instead of by the framework.  The raw
body is read before anything touches it: the HMAC is computed over the exact
bytes Indeed sent.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool
from starlette.responses import JSONResponse

from app.core.config import WebhookConfig, settings
from app.db.supabase import get_attachment_store, get_record_store
from app.models.enums import PipelineState
from app.models.webhook import WebhookRequest, WebhookResponse
from app.services.ingestion import (
    IngestionPipeline,
    processing_error_outcome,
    to_response,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_ingestion_pipeline() -> IngestionPipeline:
    """Build the pipeline from the current settings and Supabase stores."""
    config = settings.webhook_config()
    return IngestionPipeline(
        config,
        get_record_store(),
        get_attachment_store(config.resume_bucket),
    )


def _client_ip(request: Request, config: WebhookConfig) -> str | None:
    if config.trust_proxy_headers:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",", 1)[0].strip()
        if first_hop:
            return first_hop
    return request.client.host if request.client else None


def _json(result: WebhookResponse) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.body)


async def indeed_apply_webhook(request: Request) -> JSONResponse:
    """Receive an Indeed Apply application.

    Returns 200 for every authenticated POST, 401 when signature enforcement
    is on and the signature does not match, and 405 for any other method.
    """
    try:
        pipeline = get_ingestion_pipeline()
    except Exception as exc:
        # Without stores there is nowhere to audit; acknowledge and log.
        logger.exception(
            "webhook_pipeline_unavailable",
            extra={"request_method": request.method, "error_message": str(exc)},
        )
        return _json(to_response(processing_error_outcome(exc, PipelineState.received)))

    webhook_request = WebhookRequest(
        method=request.method,
        client_ip=_client_ip(request, pipeline.config),
        headers=dict(request.headers),
        body=b"",
    )

    try:
        body = await request.body()
    except Exception as exc:
        result = await run_in_threadpool(pipeline.acknowledge_failure, webhook_request, exc)
        return _json(result)

    result = await run_in_threadpool(
        pipeline.handle, webhook_request.model_copy(update={"body": body})
    )
    return _json(result)


router.add_route(settings.WEBHOOK_PATH, indeed_apply_webhook, name="indeed_apply_webhook")
