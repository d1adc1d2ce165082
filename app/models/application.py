"""Pydantic models for the ``applications`` table.

One row per job application accepted from Indeed Apply.  ``raw_data`` keeps
the decoded payload exactly as received; the remaining columns are the
normalized view of it.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from app.models.enums import QuestionSource


class CustomQuestion(BaseModel):
    """A screener question and its answer, tagged with its payload convention.

    ``question`` and ``answer`` are kept as sent, structured or not.  For
    ``questionsAndAnswers`` entries ``raw`` holds the whole array item.
    """
    source: QuestionSource
    key: str
    question: Any = None
    answer: Any = None
    raw: Any = None


class ApplicationCreate(BaseModel):
    """Payload for inserting a new application."""
    job_title: str | None = None
    job_id: str | None = None
    job_company_name: str | None = None
    job_location: str | None = None
    job_url: str | None = None

    candidate_full_name: str | None = None
    candidate_first_name: str | None = None
    candidate_last_name: str | None = None
    candidate_email: str | None = None
    candidate_phone: str | None = None

    cover_letter: str | None = None
    custom_questions: list[CustomQuestion] = []

    resume_path: str | None = None
    resume_filename: str | None = None
    resume_content_type: str | None = None

    is_processed: bool = False
    processed_at: datetime | None = None
    notes: str | None = None

    raw_data: Any = None


class Application(BaseModel):
    """Full application record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    job_title: str | None = None
    job_id: str | None = None
    job_company_name: str | None = None
    job_location: str | None = None
    job_url: str | None = None

    candidate_full_name: str | None = None
    candidate_first_name: str | None = None
    candidate_last_name: str | None = None
    candidate_email: str | None = None
    candidate_phone: str | None = None

    cover_letter: str | None = None
    custom_questions: list[CustomQuestion] = []

    resume_path: str | None = None
    resume_filename: str | None = None
    resume_content_type: str | None = None

    is_processed: bool = False
    processed_at: datetime | None = None
    notes: str | None = None

    raw_data: Any = None
    created_at: datetime
