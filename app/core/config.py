"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global `settings` singleton is available for import throughout the app.
The ingestion pipeline never reads ``settings`` directly; it receives a
``WebhookConfig`` built by ``Settings.webhook_config()``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.constants import DEFAULT_RESUME_FOLDER


def parse_flag(value: Any) -> bool:
    """Interpret a boolean-like environment value.

    Only ``True``, ``"true"`` and ``"1"`` enable the flag; everything else
    (including unset) leaves it off.
    """
    if value is True:
        return True
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1")
    return False


class WebhookConfig(BaseModel):
    """Immutable configuration handed to the ingestion pipeline."""
    model_config = ConfigDict(frozen=True)

    api_secret: str | None = None
    require_signature: bool = False
    resume_bucket: str = "indeed-apply"
    resume_folder: str = DEFAULT_RESUME_FOLDER
    trust_proxy_headers: bool = False


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # Indeed Apply
    INDEED_APPLY_API_SECRET: str = ""
    INDEED_APPLY_REQUIRE_SIGNATURE: bool = False
    WEBHOOK_PATH: str = "/indeed-apply"

    # Resume storage
    RESUME_BUCKET: str = "indeed-apply"
    RESUME_FOLDER: str = DEFAULT_RESUME_FOLDER

    # Use the first X-Forwarded-For hop as the source IP
    TRUST_PROXY_HEADERS: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("INDEED_APPLY_REQUIRE_SIGNATURE", mode="before")
    @classmethod
    def _parse_require_signature(cls, value: Any) -> bool:
        return parse_flag(value)

    def webhook_config(self) -> WebhookConfig:
        """Return the pipeline configuration derived from these settings."""
        return WebhookConfig(
            api_secret=self.INDEED_APPLY_API_SECRET or None,
            require_signature=self.INDEED_APPLY_REQUIRE_SIGNATURE,
            resume_bucket=self.RESUME_BUCKET,
            resume_folder=self.RESUME_FOLDER.strip("/"),
            trust_proxy_headers=self.TRUST_PROXY_HEADERS,
        )


settings = Settings()  # type: ignore[call-arg]
