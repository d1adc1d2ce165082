"""HMAC-SHA1 signature verification for Indeed Apply webhooks.

Indeed signs the raw request body with the shared API secret and sends the
base64-encoded HMAC-SHA1 digest in the ``X-Indeed-Signature`` header.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from collections.abc import Mapping

from app.core.constants import SIGNATURE_HEADER


def compute_signature(secret: str, raw_body: bytes) -> str:
    """Return the base64 HMAC-SHA1 of *raw_body* keyed with *secret*."""
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def get_signature_header(headers: Mapping[str, str]) -> str | None:
    """Return the signature header value, matching the name case-insensitively."""
    wanted = SIGNATURE_HEADER.lower()
    for name, value in headers.items():
        if name.lower() == wanted:
            return value
    return None


def verify_signature(
    secret: str | None,
    raw_body: bytes,
    provided_signature: str | None,
) -> bool:
    """Check *provided_signature* against the body's expected signature.

    Without a configured secret verification is bypassed and the request
    counts as valid.  With a secret, a missing or empty signature is invalid.
    """
    if not secret:
        return True

    if not provided_signature or not provided_signature.strip():
        return False

    expected = compute_signature(secret, raw_body)
    return hmac.compare_digest(
        expected.encode("ascii"),
        provided_signature.strip().encode("utf-8"),
    )
