"""Application constants.

Contains provider header names, payload key aliases, and the fixed
response messages of the acknowledgement contract.
"""

# ---------------------------------------------------------------------------
# Signature
# ---------------------------------------------------------------------------
SIGNATURE_HEADER: str = "X-Indeed-Signature"

# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------
APPLICATIONS_TABLE: str = "applications"
WEBHOOK_LOGS_TABLE: str = "webhook_logs"
DEFAULT_RESUME_FOLDER: str = "Uploads/IndeedApply/Resumes"

# ---------------------------------------------------------------------------
# Payload keys
# Field names as sent by Indeed Apply inside the nested ``job`` and
# ``applicant`` objects.
# ---------------------------------------------------------------------------
JOB_FIELDS: dict[str, str] = {
    "job_title": "jobTitle",
    "job_id": "jobId",
    "job_company_name": "jobCompany",
    "job_location": "jobLocation",
    "job_url": "jobUrl",
}

APPLICANT_FIELDS: dict[str, str] = {
    "candidate_full_name": "fullName",
    "candidate_first_name": "firstName",
    "candidate_last_name": "lastName",
    "candidate_email": "email",
    "candidate_phone": "phoneNumber",
}

QUESTIONS_AND_ANSWERS_KEY: str = "questionsAndAnswers"
LEGACY_QUESTION_PREFIXES: tuple[str, ...] = ("question_", "customQuestion")

# ---------------------------------------------------------------------------
# Resume aliases
# Structured resume objects have carried their payload under several names.
# Order matters: the first non-empty alias wins.
# ---------------------------------------------------------------------------
RESUME_DATA_KEYS: tuple[str, ...] = ("data", "content", "base64", "file")
RESUME_FILENAME_KEYS: tuple[str, ...] = ("fileName", "filename", "name")
RESUME_CONTENT_TYPE_KEYS: tuple[str, ...] = ("contentType", "mimeType")
RESUME_FILENAME_PATTERN: str = "resume_%Y%m%d%H%M%S.pdf"
DEFAULT_CONTENT_TYPE: str = "application/octet-stream"

# ---------------------------------------------------------------------------
# Response messages
# ---------------------------------------------------------------------------
MSG_RECEIVED: str = "Application received successfully"
MSG_NEEDS_REVIEW: str = "Application received but requires manual review"
MSG_PROCESSING_ERROR: str = "Application received but encountered processing error"
MSG_METHOD_NOT_ALLOWED: str = "Method Not Allowed. Only POST requests are accepted."
MSG_INVALID_SIGNATURE: str = "Invalid signature"
ERR_INVALID_JSON_PREFIX: str = "Invalid JSON (logged but accepted): "
ERR_EXCEPTION_PREFIX: str = "Exception caught (logged but accepted): "
