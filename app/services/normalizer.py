"""Indeed Apply payload -> ``ApplicationCreate`` mapping.

Indeed's payload shape drifts independently of this service, so every
lookup here is tolerant: a missing key, a wrong type or a whole missing
sub-object yields ``None`` for the affected fields and never an exception.

Custom screener questions arrive in two conventions that may coexist in one
payload:

* current -- a ``questionsAndAnswers`` array of ``{question, answer}`` objects
* legacy  -- top-level keys prefixed ``question_`` or ``customQuestion``

Both are folded into one ordered list of ``CustomQuestion`` entries tagged
with their source.
"""

from __future__ import annotations

import logging
from typing import Any

from app.core.constants import (
    APPLICANT_FIELDS,
    JOB_FIELDS,
    LEGACY_QUESTION_PREFIXES,
    QUESTIONS_AND_ANSWERS_KEY,
)
from app.models.application import ApplicationCreate, CustomQuestion
from app.models.enums import QuestionSource

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tolerant accessors
# ---------------------------------------------------------------------------

def _as_mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_text(value: Any) -> str | None:
    """Coerce a scalar JSON value to text; anything else becomes ``None``.

    Strings pass through exactly as received.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _map_fields(source: dict[str, Any], fields: dict[str, str]) -> dict[str, str | None]:
    return {attr: _as_text(source.get(key)) for attr, key in fields.items()}


# ---------------------------------------------------------------------------
# Candidate names
# ---------------------------------------------------------------------------

def _reconcile_names(
    full_name: str | None,
    first_name: str | None,
    last_name: str | None,
) -> tuple[str | None, str | None, str | None]:
    """Fill whichever name representation is missing from the other.

    The full name is canonical.  Without it, it is built from first/last.
    Without first/last, they are split from the full name.
    """
    if full_name is None and (first_name or last_name):
        full_name = " ".join(part for part in (first_name, last_name) if part)

    if full_name is not None and first_name is None and last_name is None:
        parts = full_name.split(None, 1)
        first_name = parts[0] if parts else None
        last_name = parts[1] if len(parts) > 1 else None

    return full_name, first_name, last_name


# ---------------------------------------------------------------------------
# Custom questions
# ---------------------------------------------------------------------------

def _current_questions(document: dict[str, Any]) -> list[CustomQuestion]:
    items = document.get(QUESTIONS_AND_ANSWERS_KEY)
    if not isinstance(items, list):
        return []

    questions: list[CustomQuestion] = []
    for idx, item in enumerate(items):
        if isinstance(item, dict):
            question = item.get("question")
            key = (
                _as_text(item.get("id"))
                or _as_text(_as_mapping(question).get("id"))
                or str(idx)
            )
            answer = item.get("answer")
        else:
            # Bare values keep their position so nothing the provider sent is lost
            key, question, answer = str(idx), None, item
        questions.append(
            CustomQuestion(
                source=QuestionSource.current,
                key=key,
                question=question,
                answer=answer,
                raw=item,
            )
        )
    return questions


def _legacy_questions(document: dict[str, Any]) -> list[CustomQuestion]:
    return [
        CustomQuestion(
            source=QuestionSource.legacy,
            key=key,
            question=key,
            answer=value,
        )
        for key, value in document.items()
        if key.startswith(LEGACY_QUESTION_PREFIXES)
    ]


def extract_custom_questions(document: Any) -> list[CustomQuestion]:
    """Return current-format questions followed by legacy ones, in payload order."""
    payload = _as_mapping(document)
    return _current_questions(payload) + _legacy_questions(payload)


def extract_resume_payload(document: Any) -> Any:
    """Return ``applicant.resume.file`` if present and non-empty, else ``None``."""
    applicant = _as_mapping(_as_mapping(document).get("applicant"))
    resume = _as_mapping(applicant.get("resume"))
    return resume.get("file") or None


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def normalize_application(document: Any) -> ApplicationCreate:
    """Map a decoded Indeed Apply payload to an ``ApplicationCreate``.

    The resume columns are left empty; attaching the stored file is the
    caller's job.  ``raw_data`` is the untouched *document*.
    """
    payload = _as_mapping(document)
    job = _as_mapping(payload.get("job"))
    applicant = _as_mapping(payload.get("applicant"))

    job_fields = _map_fields(job, JOB_FIELDS)
    candidate = _map_fields(applicant, APPLICANT_FIELDS)

    full_name, first_name, last_name = _reconcile_names(
        candidate["candidate_full_name"],
        candidate["candidate_first_name"],
        candidate["candidate_last_name"],
    )

    custom_questions = extract_custom_questions(payload)

    logger.debug(
        "application_normalized",
        extra={
            "job_id": job_fields["job_id"],
            "has_applicant": bool(applicant),
            "custom_questions": len(custom_questions),
        },
    )

    return ApplicationCreate(
        **job_fields,
        candidate_full_name=full_name,
        candidate_first_name=first_name,
        candidate_last_name=last_name,
        candidate_email=candidate["candidate_email"],
        candidate_phone=candidate["candidate_phone"],
        cover_letter=_as_text(payload.get("coverLetter")),
        custom_questions=custom_questions,
        raw_data=document,
    )
