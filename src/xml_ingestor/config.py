# xml-ingestor/src/xml_ingestor/config.py
from __future__ import annotations

from typing import Optional

from pydantic import AnyUrl, BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # AWS/S3
    AWS_REGION: str = "eu-west-1"
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    AWS_SESSION_TOKEN: Optional[str] = None
    S3_ENDPOINT_URL: Optional[str] = None
    S3_SSE_KMS_KEY_ID: Optional[str] = None

    # Containers
    TARGET_BUCKET: Optional[str] = None  # read side; falls back to the notification's bucket
    UPLOAD_BUCKET: Optional[str] = None  # write side for generated keys

    # Upload API
    API_KEY: str = ""
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # Sink
    SINK_ENDPOINT: Optional[AnyUrl] = None
    SINK_TOKEN: Optional[str] = None
    SINK_TIMEOUT_S: int = 15

    # Slack
    SLACK_WEBHOOK_URL: Optional[AnyUrl] = None

    # Logging
    LOG_FILE: Optional[str] = None
    LOG_JSONL: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    # Handler
    MIN_REMAINING_MS: int = 2000

    @field_validator("TARGET_BUCKET", "UPLOAD_BUCKET", "S3_ENDPOINT_URL", "LOG_FILE", "LOG_JSONL")
    @classmethod
    def empty_as_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("MIN_REMAINING_MS", "MAX_UPLOAD_BYTES")
    @classmethod
    def non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must be >= 0")
        return v


class HandlerConfig(BaseModel):
    """Everything the ingestion handler needs, resolved once at startup."""

    target_container: Optional[str] = None
    region: str = "eu-west-1"
    min_remaining_ms: int = 2000

    @classmethod
    def from_settings(cls, s: Settings | None = None) -> "HandlerConfig":
        s = s or settings
        return cls(
            target_container=s.TARGET_BUCKET,
            region=s.AWS_REGION,
            min_remaining_ms=s.MIN_REMAINING_MS,
        )


settings = Settings()


def reload_from_env(env_path: str | None = None) -> None:
    """Reload settings from .env in place so modules holding a reference see the change."""
    fresh = Settings(_env_file=env_path) if env_path else Settings()  # type: ignore
    for name in Settings.model_fields:
        setattr(settings, name, getattr(fresh, name))
