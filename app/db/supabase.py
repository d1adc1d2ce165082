"""Supabase client singleton and store factories.

``get_supabase()`` returns a lazily-initialized, process-wide Supabase client
using credentials from ``settings``.  The same client backs both the Postgres
tables and the Storage bucket holding resumes, so the store factories below
simply wrap it.
"""

from supabase import Client, create_client

from app.core.config import settings
from app.db.store import SupabaseAttachmentStore, SupabaseRecordStore

_client: Client | None = None


def get_supabase() -> Client:
    """Return the singleton Supabase client, creating it on first call."""
    global _client
    if _client is None:
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    return _client


def get_record_store() -> SupabaseRecordStore:
    """Return a record store bound to the shared client."""
    return SupabaseRecordStore(get_supabase())


def get_attachment_store(bucket: str) -> SupabaseAttachmentStore:
    """Return an attachment store writing into *bucket*."""
    return SupabaseAttachmentStore(get_supabase(), bucket)
