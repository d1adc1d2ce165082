"""Durable stores used by the ingestion pipeline.

The pipeline talks to two narrow interfaces:

* ``RecordStore`` -- inserts ``applications`` and ``webhook_logs`` rows and
  returns them with their store-assigned ``id`` / ``created_at``.
* ``AttachmentStore`` -- writes a blob under a logical path.

``SupabaseRecordStore`` and ``SupabaseAttachmentStore`` implement them on top
of the shared Supabase client.  Every failure is re-raised as ``StoreError``.
"""

from __future__ import annotations

import logging
from typing import Protocol

from supabase import Client

from app.core.constants import APPLICATIONS_TABLE, WEBHOOK_LOGS_TABLE
from app.models.application import Application, ApplicationCreate
from app.models.audit import AuditLog, AuditLogCreate

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when a durable write fails or returns no row."""


class RecordStore(Protocol):
    def insert_application(self, application: ApplicationCreate) -> Application: ...

    def insert_log(self, entry: AuditLogCreate) -> AuditLog: ...


class AttachmentStore(Protocol):
    def put(self, path: str, content: bytes, content_type: str) -> str: ...


# ---------------------------------------------------------------------------
# Supabase implementations
# ---------------------------------------------------------------------------

class SupabaseRecordStore:
    """``RecordStore`` backed by Supabase Postgres tables."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def _insert(self, table: str, row: dict) -> dict:
        try:
            result = self._client.table(table).insert(row).execute()
        except Exception as exc:
            logger.error(
                "store_insert_failed",
                extra={"table": table, "error_message": str(exc)},
            )
            raise StoreError(f"Insert into {table} failed: {exc}") from exc
        if not result.data:
            raise StoreError(f"Insert into {table} returned no row")
        return result.data[0]

    def insert_application(self, application: ApplicationCreate) -> Application:
        row = self._insert(APPLICATIONS_TABLE, application.model_dump(mode="json"))
        return Application(**row)

    def insert_log(self, entry: AuditLogCreate) -> AuditLog:
        row = self._insert(WEBHOOK_LOGS_TABLE, entry.model_dump(mode="json"))
        return AuditLog(**row)


class SupabaseAttachmentStore:
    """``AttachmentStore`` backed by a Supabase Storage bucket."""

    def __init__(self, client: Client, bucket: str) -> None:
        self._client = client
        self._bucket = bucket

    def put(self, path: str, content: bytes, content_type: str) -> str:
        """Upload *content* to *path* inside the bucket and return the path."""
        try:
            self._client.storage.from_(self._bucket).upload(
                path=path,
                file=content,
                file_options={"content-type": content_type, "upsert": "false"},
            )
        except Exception as exc:
            raise StoreError(
                f"Upload to {self._bucket}/{path} failed: {exc}"
            ) from exc
        return path
