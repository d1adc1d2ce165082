"""Pydantic models for the ``webhook_logs`` table.

One row per inbound request to the webhook endpoint, whatever its outcome.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AuditLogCreate(BaseModel):
    """Payload for inserting a webhook log entry."""
    request_method: str
    request_ip: str | None = None
    request_headers: str | None = None
    request_body: str | None = None
    signature_valid: bool | None = None
    response_code: int | None = None
    response_message: str | None = None
    success: bool = False
    error_message: str | None = None
    application_id: int | None = None


class AuditLog(BaseModel):
    """Full webhook log record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    request_method: str
    request_ip: str | None = None
    request_headers: str | None = None
    request_body: str | None = None
    signature_valid: bool | None = None
    response_code: int | None = None
    response_message: str | None = None
    success: bool = False
    error_message: str | None = None
    application_id: int | None = None
    created_at: datetime
