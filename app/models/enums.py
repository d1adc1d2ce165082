"""Enum types shared by the ingestion models."""

from enum import Enum


class QuestionSource(str, Enum):
    """Which payload convention a custom question came from."""
    current = "current"
    legacy = "legacy"


class PipelineState(str, Enum):
    """Last state reached while handling one webhook request."""
    received = "received"
    method_checked = "method_checked"
    signature_checked = "signature_checked"
    parsed = "parsed"
    normalized = "normalized"
    persisted = "persisted"
    acknowledged = "acknowledged"
    rejected = "rejected"
