"""Runtime settings for the doc-cloud publisher.

Values come from environment variables (case-insensitive) or a ``.env``
file in the working directory. Use ``get_settings()`` to share one cached
instance across a process.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
VALID_LOG_FORMATS = {"json", "console"}


class Settings(BaseSettings):
    """Publisher settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    doc_cloud_url: str = Field(
        default="http://localhost:3000/api/packages",
        description="Doc Cloud ingestion endpoint receiving the package upload",
    )
    upload_timeout: float = Field(
        default=120.0,
        gt=0,
        description="Upload timeout in seconds",
    )
    scratch_dir: str = Field(
        default=".doccloud",
        description="Scratch storage used when the host does not supply one",
    )
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(VALID_LOG_LEVELS)}")
        return value

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in VALID_LOG_FORMATS:
            raise ValueError(f"log_format must be one of {sorted(VALID_LOG_FORMATS)}")
        return value


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
