"""Unit tests for the Supabase-backed stores."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from app.db.store import StoreError, SupabaseAttachmentStore, SupabaseRecordStore
from app.models.application import ApplicationCreate, CustomQuestion
from app.models.audit import AuditLogCreate
from app.models.enums import QuestionSource


def _chainable_table_mock() -> MagicMock:
    """Return a mock that supports fluent chaining (insert/select/execute)."""
    m = MagicMock()
    for method in ("select", "insert", "eq", "limit"):
        getattr(m, method).return_value = m
    return m


class TestSupabaseRecordStore:
    def test_insert_application_serializes_and_returns_record(self) -> None:
        table = _chainable_table_mock()
        table.execute.return_value = MagicMock(
            data=[
                {
                    "id": 41,
                    "job_title": "Engineer",
                    "custom_questions": [
                        {"source": "legacy", "key": "question_a", "question": "question_a", "answer": "b"}
                    ],
                    "raw_data": {"job": {"jobTitle": "Engineer"}},
                    "created_at": "2026-03-01T10:00:00+00:00",
                }
            ]
        )
        client = MagicMock()
        client.table.return_value = table

        application = ApplicationCreate(
            job_title="Engineer",
            custom_questions=[
                CustomQuestion(
                    source=QuestionSource.legacy, key="question_a", question="question_a", answer="b"
                )
            ],
            raw_data={"job": {"jobTitle": "Engineer"}},
        )
        record = SupabaseRecordStore(client).insert_application(application)

        client.table.assert_called_once_with("applications")
        row = table.insert.call_args.args[0]
        assert row["job_title"] == "Engineer"
        assert row["custom_questions"][0]["source"] == "legacy"
        assert row["is_processed"] is False
        assert record.id == 41
        assert record.custom_questions[0].source == QuestionSource.legacy

    def test_insert_log(self) -> None:
        table = _chainable_table_mock()
        table.execute.return_value = MagicMock(
            data=[
                {
                    "id": 3,
                    "request_method": "POST",
                    "response_code": 200,
                    "success": True,
                    "created_at": "2026-03-01T10:00:00+00:00",
                }
            ]
        )
        client = MagicMock()
        client.table.return_value = table

        record = SupabaseRecordStore(client).insert_log(
            AuditLogCreate(request_method="POST", response_code=200, success=True)
        )

        client.table.assert_called_once_with("webhook_logs")
        assert record.id == 3
        assert record.success is True

    def test_empty_result_raises_store_error(self) -> None:
        table = _chainable_table_mock()
        table.execute.return_value = MagicMock(data=[])
        client = MagicMock()
        client.table.return_value = table

        with pytest.raises(StoreError):
            SupabaseRecordStore(client).insert_log(AuditLogCreate(request_method="POST"))

    def test_client_error_is_wrapped(self) -> None:
        table = _chainable_table_mock()
        table.execute.side_effect = Exception("connection reset")
        client = MagicMock()
        client.table.return_value = table

        with pytest.raises(StoreError, match="connection reset"):
            SupabaseRecordStore(client).insert_application(ApplicationCreate())


class TestSupabaseAttachmentStore:
    def test_put_uploads_to_bucket(self) -> None:
        client = MagicMock()
        bucket = client.storage.from_.return_value

        path = SupabaseAttachmentStore(client, "indeed-apply").put(
            "Uploads/IndeedApply/Resumes/abc_cv.pdf", b"%PDF", "application/pdf"
        )

        assert path == "Uploads/IndeedApply/Resumes/abc_cv.pdf"
        client.storage.from_.assert_called_once_with("indeed-apply")
        bucket.upload.assert_called_once_with(
            path="Uploads/IndeedApply/Resumes/abc_cv.pdf",
            file=b"%PDF",
            file_options={"content-type": "application/pdf", "upsert": "false"},
        )

    def test_upload_error_is_wrapped(self) -> None:
        client = MagicMock()
        client.storage.from_.return_value.upload.side_effect = Exception("409 Duplicate")

        with pytest.raises(StoreError, match="409 Duplicate"):
            SupabaseAttachmentStore(client, "indeed-apply").put("a/b.pdf", b"x", "application/pdf")
