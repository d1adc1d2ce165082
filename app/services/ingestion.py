"""Indeed Apply webhook ingestion pipeline.

Sequences one request through:

1. Audit trail opened (method, IP, headers)
2. Method check -- only POST is accepted (405 otherwise)
3. Signature verification -- 401 only when enforcement is on
4. JSON parsing -- failures are acknowledged for manual review
5. Normalization into an ``ApplicationCreate``
6. Resume decode + store (best-effort)
7. Application insert
8. Audit trail finalized -- always, exactly once

Indeed retries any request that does not get a 2xx, so apart from the method
and signature rejections every outcome -- including unexpected exceptions --
is acknowledged with HTTP 200.  The audit log, not the response, records
whether processing actually worked.
"""

from __future__ import annotations

import logging
from pydantic import BaseModel

from app.core.config import WebhookConfig
from app.core.constants import (
    ERR_EXCEPTION_PREFIX,
    ERR_INVALID_JSON_PREFIX,
    MSG_INVALID_SIGNATURE,
    MSG_METHOD_NOT_ALLOWED,
    MSG_NEEDS_REVIEW,
    MSG_PROCESSING_ERROR,
    MSG_RECEIVED,
)
from app.db.store import AttachmentStore, RecordStore
from app.models.enums import PipelineState
from app.models.webhook import PipelineOutcome, WebhookRequest, WebhookResponse
from app.services.audit import AuditTrail
from app.services.normalizer import extract_resume_payload, normalize_application
from app.services.payload import parse_payload
from app.services.resume import decode_and_store
from app.services.signature import get_signature_header, verify_signature

logger = logging.getLogger(__name__)


class _Progress(BaseModel):
    state: PipelineState = PipelineState.received


def to_response(outcome: PipelineOutcome) -> WebhookResponse:
    """Map an internal outcome onto the fixed external contract.

    Rejections carry ``{"success": false, "error": ...}``; everything else is
    an acknowledgement ``{"success": true, "message": ...}`` even when the
    internal ``success`` flag is false.
    """
    if outcome.rejected:
        return WebhookResponse(
            status_code=outcome.status_code,
            body={"success": False, "error": outcome.message},
        )
    return WebhookResponse(
        status_code=outcome.status_code,
        body={"success": True, "message": outcome.message},
    )


def processing_error_outcome(exc: BaseException, state: PipelineState) -> PipelineOutcome:
    """Acknowledge an unexpected failure while recording it as unsuccessful."""
    return PipelineOutcome(
        state=state,
        status_code=200,
        success=False,
        message=MSG_PROCESSING_ERROR,
        error=f"{ERR_EXCEPTION_PREFIX}{exc}",
    )


def _reject(status_code: int, message: str) -> PipelineOutcome:
    return PipelineOutcome(
        state=PipelineState.rejected,
        status_code=status_code,
        success=False,
        message=message,
        error=message,
    )


class IngestionPipeline:
    """Handles one webhook request at a time; holds no per-request state."""

    def __init__(
        self,
        config: WebhookConfig,
        records: RecordStore,
        attachments: AttachmentStore,
    ) -> None:
        self.config = config
        self._records = records
        self._attachments = attachments

    def handle(self, request: WebhookRequest) -> WebhookResponse:
        """Process *request* and return the response to send to Indeed."""
        trail = AuditTrail(self._records, request)
        progress = _Progress()

        logger.info(
            "webhook_received",
            extra={
                "request_method": request.method,
                "client_ip": request.client_ip,
                "body_bytes": len(request.body),
            },
        )

        try:
            outcome = self._process(request, trail, progress)
        except Exception as exc:
            logger.exception(
                "webhook_processing_failed",
                extra={"state": progress.state.value, "error_message": str(exc)},
            )
            outcome = processing_error_outcome(exc, progress.state)

        trail.finalize(outcome)

        logger.info(
            "webhook_completed",
            extra={
                "state": outcome.state.value,
                "status_code": outcome.status_code,
                "success": outcome.success,
                "application_id": outcome.application_id,
            },
        )
        return to_response(outcome)

    def acknowledge_failure(self, request: WebhookRequest, exc: BaseException) -> WebhookResponse:
        """Audit and answer a request whose body could not be read.

        The method check still applies; any other request is acknowledged as
        a processing error so that Indeed does not retry it.
        """
        trail = AuditTrail(self._records, request)
        if request.method.upper() != "POST":
            outcome = _reject(405, MSG_METHOD_NOT_ALLOWED)
        else:
            logger.error(
                "webhook_body_unreadable",
                extra={"client_ip": request.client_ip, "error_message": str(exc)},
            )
            outcome = processing_error_outcome(exc, PipelineState.received)
        trail.finalize(outcome)
        return to_response(outcome)

    def _process(
        self,
        request: WebhookRequest,
        trail: AuditTrail,
        progress: _Progress,
    ) -> PipelineOutcome:
        if request.method.upper() != "POST":
            return _reject(405, MSG_METHOD_NOT_ALLOWED)
        progress.state = PipelineState.method_checked

        body = request.body
        trail.record_body(body)

        signature_valid = verify_signature(
            self.config.api_secret,
            body,
            get_signature_header(request.headers),
        )
        trail.record_signature(signature_valid)

        if not signature_valid:
            logger.warning(
                "webhook_signature_invalid",
                extra={
                    "client_ip": request.client_ip,
                    "enforced": self.config.require_signature,
                },
            )
            if self.config.require_signature:
                return _reject(401, MSG_INVALID_SIGNATURE)
        progress.state = PipelineState.signature_checked

        parsed = parse_payload(body)
        if not parsed.ok:
            logger.warning(
                "webhook_payload_unparseable",
                extra={"error_message": parsed.error},
            )
            return PipelineOutcome(
                state=PipelineState.acknowledged,
                status_code=200,
                success=False,
                message=MSG_NEEDS_REVIEW,
                error=f"{ERR_INVALID_JSON_PREFIX}{parsed.error}",
            )
        progress.state = PipelineState.parsed

        application = normalize_application(parsed.document)
        progress.state = PipelineState.normalized

        resume_payload = extract_resume_payload(parsed.document)
        if resume_payload is not None:
            stored = decode_and_store(
                resume_payload,
                self._attachments,
                self.config.resume_folder,
            )
            if stored is not None:
                application.resume_path = stored.path
                application.resume_filename = stored.filename
                application.resume_content_type = stored.content_type

        record = self._records.insert_application(application)
        progress.state = PipelineState.persisted

        return PipelineOutcome(
            state=PipelineState.acknowledged,
            status_code=200,
            success=True,
            message=MSG_RECEIVED,
            application_id=record.id,
        )
