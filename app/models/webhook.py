"""Transport-neutral request/response models for the webhook pipeline."""

from pydantic import BaseModel, ConfigDict

from app.models.enums import PipelineState


class WebhookRequest(BaseModel):
    """The parts of an inbound HTTP request the pipeline needs."""
    model_config = ConfigDict(frozen=True)

    method: str
    client_ip: str | None = None
    headers: dict[str, str] = {}
    body: bytes = b""


class PipelineOutcome(BaseModel):
    """Internal result of one pipeline run, before response mapping.

    ``success`` is the internal flag written to the audit log.  It can be
    ``False`` while ``status_code`` is 200: the request was acknowledged to
    the provider but needs attention.
    """
    state: PipelineState
    status_code: int
    success: bool
    message: str
    error: str | None = None
    application_id: int | None = None

    @property
    def rejected(self) -> bool:
        return self.state == PipelineState.rejected


class WebhookResponse(BaseModel):
    """External response: status code plus the JSON body sent to Indeed."""
    status_code: int
    body: dict[str, bool | str]
