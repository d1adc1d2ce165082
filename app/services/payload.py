"""Defensive JSON decoding of webhook bodies.

``parse_payload`` never raises: a body that cannot be decoded comes back as a
``ParseResult`` carrying the error text, and the caller decides what to do.
Decoding is strict RFC 8259 JSON; the ``NaN`` / ``Infinity`` extensions that
``json`` accepts by default are refused.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict


class ParseResult(BaseModel):
    """Decoded document, or the reason decoding failed."""
    model_config = ConfigDict(frozen=True)

    document: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class _NonStandardConstant(ValueError):
    pass


def _reject_constant(name: str) -> Any:
    raise _NonStandardConstant(f"Non-standard literal {name} is not valid JSON")


def parse_payload(raw_body: bytes) -> ParseResult:
    """Decode *raw_body* as a UTF-8 JSON document."""
    if not raw_body or not raw_body.strip():
        return ParseResult(error="Empty request body")

    try:
        text = raw_body.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        return ParseResult(error=f"Body is not valid UTF-8: {exc}")

    try:
        document = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        return ParseResult(error=f"Syntax error: {exc.msg} at line {exc.lineno} column {exc.colno}")
    except _NonStandardConstant as exc:
        return ParseResult(error=str(exc))
    except RecursionError:
        return ParseResult(error="Maximum nesting depth exceeded")

    return ParseResult(document=document)
