"""Shared test fixtures.

Provides a ``test_client`` for FastAPI, mock Supabase client fixtures for the
health endpoint, and in-memory record / attachment stores for driving the
ingestion pipeline without a database.
"""

import os

# Settings are instantiated at import time; give them something to load.
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-key")

from collections.abc import Callable, Generator  # noqa: E402
from datetime import datetime, timezone  # noqa: E402
from unittest.mock import MagicMock, patch  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.config import WebhookConfig  # noqa: E402
from app.db.store import StoreError  # noqa: E402
from app.models.application import Application, ApplicationCreate  # noqa: E402
from app.models.audit import AuditLog, AuditLogCreate  # noqa: E402
from app.services.ingestion import IngestionPipeline  # noqa: E402


class FakeRecordStore:
    """In-memory ``RecordStore`` with auto-increment ids."""

    def __init__(self) -> None:
        self.applications: list[Application] = []
        self.logs: list[AuditLog] = []
        self.fail_applications = False
        self.fail_logs = False

    def insert_application(self, application: ApplicationCreate) -> Application:
        if self.fail_applications:
            raise StoreError("applications insert refused")
        record = Application(
            id=len(self.applications) + 1,
            created_at=datetime.now(timezone.utc),
            **application.model_dump(),
        )
        self.applications.append(record)
        return record

    def insert_log(self, entry: AuditLogCreate) -> AuditLog:
        if self.fail_logs:
            raise StoreError("webhook_logs insert refused")
        record = AuditLog(
            id=len(self.logs) + 1,
            created_at=datetime.now(timezone.utc),
            **entry.model_dump(),
        )
        self.logs.append(record)
        return record


class FakeAttachmentStore:
    """In-memory ``AttachmentStore`` keyed by path."""

    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.fail = False

    def put(self, path: str, content: bytes, content_type: str) -> str:
        if self.fail:
            raise StoreError("bucket unavailable")
        self.objects[path] = (content, content_type)
        return path


@pytest.fixture()
def records() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture()
def attachments() -> FakeAttachmentStore:
    return FakeAttachmentStore()


@pytest.fixture()
def make_pipeline(
    records: FakeRecordStore, attachments: FakeAttachmentStore
) -> Callable[..., IngestionPipeline]:
    """Return a factory building a pipeline over the in-memory stores."""

    def _make(**config: object) -> IngestionPipeline:
        return IngestionPipeline(WebhookConfig(**config), records, attachments)

    return _make


@pytest.fixture()
def mock_supabase_module() -> Generator[MagicMock, None, None]:
    """Patch the Supabase client at module level in the health router."""
    mock_client = MagicMock()
    # Mock the select -> limit -> execute chain
    mock_table = MagicMock()
    mock_select = MagicMock()
    mock_limit = MagicMock()

    mock_client.table.return_value = mock_table
    mock_table.select.return_value = mock_select
    mock_select.limit.return_value = mock_limit
    mock_limit.execute.return_value = MagicMock()  # non-None result

    with patch("app.routers.health.get_supabase", return_value=mock_client):
        yield mock_client


@pytest.fixture()
def mock_supabase_disconnected() -> Generator[MagicMock, None, None]:
    """Patch ``get_supabase`` to simulate a disconnected database."""
    with patch(
        "app.routers.health.get_supabase",
        side_effect=Exception("Connection refused"),
    ):
        yield MagicMock()


@pytest.fixture()
def test_client() -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient."""
    from app.main import app

    with TestClient(app) as client:
        yield client
