"""Resume attachment decoding and storage.

Indeed embeds the candidate's resume as base64 inside
``applicant.resume.file``.  Depending on the integration vintage that value is
either a bare base64 string or an object such as::

    {"fileName": "cv.pdf", "contentType": "application/pdf", "data": "JVBERi0..."}

``decode_resume`` resolves every accepted shape into a ``ResumeFile`` (or
``None``); ``store_resume`` writes it to the attachment store.
``decode_and_store`` chains both and swallows any failure: a broken resume
must never cost us the application itself.
"""

from __future__ import annotations

import base64
import binascii
import logging
import mimetypes
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict

from app.core.constants import (
    DEFAULT_CONTENT_TYPE,
    RESUME_CONTENT_TYPE_KEYS,
    RESUME_DATA_KEYS,
    RESUME_FILENAME_KEYS,
    RESUME_FILENAME_PATTERN,
)
from app.db.store import AttachmentStore

logger = logging.getLogger(__name__)


class ResumeFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: bytes
    filename: str
    content_type: str


class StoredResume(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    filename: str
    content_type: str
    size: int


# ---------------------------------------------------------------------------
# Alias resolution
# ---------------------------------------------------------------------------

def _first_text(source: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = source.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _split_data_url(data: str) -> tuple[str, str | None]:
    """Strip a ``data:<mime>;base64,`` prefix, returning the mime type if any."""
    if not data.startswith("data:") or "," not in data:
        return data, None
    header, encoded = data.split(",", 1)
    mime = header[len("data:"):].split(";", 1)[0].strip()
    return encoded, mime or None


def _decode_base64(data: str) -> bytes:
    """Strictly decode standard base64; any foreign character yields ``b""``.

    Whitespace (line wrapping) is dropped and missing padding restored first.
    """
    compact = "".join(data.split())
    compact += "=" * (-len(compact) % 4)
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError):
        return b""


def _safe_filename(name: str | None, now: datetime) -> str:
    if name:
        basename = PurePosixPath(name.replace("\\", "/")).name
        if basename not in ("", ".", ".."):
            return basename
    return now.strftime(RESUME_FILENAME_PATTERN)


def decode_resume(payload: Any, now: datetime | None = None) -> ResumeFile | None:
    """Resolve *payload* into a ``ResumeFile``, or ``None`` if nothing usable.

    Accepts a bare base64 string, or a mapping carrying the data under one of
    ``RESUME_DATA_KEYS`` and optionally a filename / content type under their
    alias keys.  Undecodable or empty content yields ``None``.
    """
    if isinstance(payload, str):
        data, filename, content_type = payload, None, None
    elif isinstance(payload, dict):
        data = _first_text(payload, RESUME_DATA_KEYS)
        filename = _first_text(payload, RESUME_FILENAME_KEYS)
        content_type = _first_text(payload, RESUME_CONTENT_TYPE_KEYS)
    else:
        return None

    if not data or not data.strip():
        return None

    data, data_url_type = _split_data_url(data.strip())
    content = _decode_base64(data)
    if not content:
        return None

    filename = _safe_filename(filename, now or datetime.now(timezone.utc))
    content_type = (
        content_type
        or data_url_type
        or mimetypes.guess_type(filename)[0]
        or DEFAULT_CONTENT_TYPE
    )
    return ResumeFile(content=content, filename=filename, content_type=content_type)


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

def store_resume(
    resume: ResumeFile,
    attachments: AttachmentStore,
    folder: str,
) -> StoredResume:
    """Write *resume* under *folder* and return where it landed.

    A short random token prefixes the filename so that two candidates
    uploading ``resume.pdf`` never collide.
    """
    path = f"{folder.strip('/')}/{uuid4().hex[:12]}_{resume.filename}"
    stored_path = attachments.put(path, resume.content, resume.content_type)
    return StoredResume(
        path=stored_path,
        filename=resume.filename,
        content_type=resume.content_type,
        size=len(resume.content),
    )


def decode_and_store(
    payload: Any,
    attachments: AttachmentStore,
    folder: str,
    now: datetime | None = None,
) -> StoredResume | None:
    """Best-effort decode + store.  Never raises; failures are only logged."""
    try:
        resume = decode_resume(payload, now=now)
        if resume is None:
            logger.info("resume_skipped", extra={"reason": "no_usable_data"})
            return None

        stored = store_resume(resume, attachments, folder)
    except Exception as exc:
        logger.warning(
            "resume_upload_failed",
            extra={"error_message": str(exc)},
            exc_info=True,
        )
        return None

    logger.info(
        "resume_stored",
        extra={
            "path": stored.path,
            "content_type": stored.content_type,
            "size_bytes": stored.size,
        },
    )
    return stored
