"""Per-request audit trail for the webhook endpoint.

An ``AuditTrail`` is opened as soon as a request arrives, filled in as the
pipeline progresses, and finalized exactly once with the request's outcome.
Finalizing performs the single durable write to ``webhook_logs``.
"""

from __future__ import annotations

import json
import logging

from app.db.store import RecordStore
from app.models.audit import AuditLog, AuditLogCreate
from app.models.webhook import PipelineOutcome, WebhookRequest

logger = logging.getLogger(__name__)


_TEXT_FIELDS = (
    "request_method",
    "request_ip",
    "request_headers",
    "request_body",
    "response_message",
    "error_message",
)


def serialize_headers(headers: dict[str, str]) -> str:
    return json.dumps(headers, indent=2, ensure_ascii=False)


def escape_nul(text: str | None) -> str | None:
    """Postgres text columns refuse NUL; store it as the visible ``\\u0000``."""
    if text is None:
        return None
    return text.replace("\x00", "\\u0000")


class AuditTrail:
    """In-memory log entry for one request, written once by ``finalize``."""

    def __init__(self, records: RecordStore, request: WebhookRequest) -> None:
        self._records = records
        self._finalized = False
        self.entry = AuditLogCreate(
            request_method=request.method.upper(),
            request_ip=request.client_ip,
            request_headers=serialize_headers(request.headers),
        )

    @property
    def finalized(self) -> bool:
        return self._finalized

    def record_body(self, body: bytes) -> None:
        self.entry.request_body = body.decode("utf-8", errors="replace")

    def record_signature(self, valid: bool) -> None:
        self.entry.signature_valid = valid

    def finalize(self, outcome: PipelineOutcome) -> AuditLog | None:
        """Copy *outcome* onto the entry and write it.

        Returns the stored row, or ``None`` when the write failed.  A write
        failure is logged and otherwise absorbed: the caller still owes the
        provider a response.  Calling this twice is a programming error.
        """
        if self._finalized:
            raise RuntimeError("Audit entry already finalized")
        self._finalized = True

        self.entry.response_code = outcome.status_code
        self.entry.success = outcome.success
        self.entry.application_id = outcome.application_id
        self.entry.response_message = outcome.message
        self.entry.error_message = outcome.error
        for field in _TEXT_FIELDS:
            setattr(self.entry, field, escape_nul(getattr(self.entry, field)))

        try:
            stored = self._records.insert_log(self.entry)
        except Exception as exc:
            logger.error(
                "audit_log_write_failed",
                extra={
                    "request_method": self.entry.request_method,
                    "response_code": self.entry.response_code,
                    "error_message": str(exc),
                },
                exc_info=True,
            )
            return None

        logger.info(
            "audit_log_written",
            extra={
                "log_id": stored.id,
                "response_code": stored.response_code,
                "success": stored.success,
                "application_id": stored.application_id,
            },
        )
        return stored
