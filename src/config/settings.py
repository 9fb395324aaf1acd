# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for deployment-specific settings: extraction
provider, document limits, object/relational store locations, calendar
defaults and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === EXTRACTION SERVICE ===
    extraction_provider: Literal["google", "anthropic"] = "google"
    extraction_model: str = "gemini-2.0-flash"
    extraction_temperature: float = 0.2
    answer_key_temperature: float = 0.1
    extraction_max_tokens: int = 16384

    # Provider API keys
    google_api_key: str = ""
    anthropic_api_key: str = ""

    # === Documents ===
    max_document_size_mb: int = 50
    encode_chunk_size: int = 32768

    # === Object store ===
    object_store: Literal["local", "s3"] = "local"
    object_store_root: Path = Path("~/.examingest/objects")
    s3_bucket: str = ""
    s3_prefix: str = "examingest/"
    s3_region: str = ""
    s3_endpoint_url: str = ""

    # === Relational store ===
    database_path: str = "~/.examingest/examingest.db"

    # === Calendar ===
    calendar_default_year: int | None = None

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("encode_chunk_size")
    @classmethod
    def validate_encode_chunk_size(cls, v: int) -> int:  # noqa: N805
        """Encoding works on 3-byte groups; smaller chunks are meaningless."""
        if v < 3:
            raise ValueError("encode_chunk_size must be >= 3")
        return v

    @field_validator("max_document_size_mb")
    @classmethod
    def validate_document_size(cls, v: int) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError("max_document_size_mb must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.object_store == "s3" and not self.s3_bucket:
            errors.append("OBJECT_STORE=s3 requires S3_BUCKET")

        if not 0.0 <= self.extraction_temperature <= 2.0:
            errors.append("EXTRACTION_TEMPERATURE must be within [0, 2]")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def max_document_bytes(self) -> int:
        """Maximum accepted document size in bytes."""
        return self.max_document_size_mb * 1024 * 1024

    def api_key_for(self, provider: str | None = None) -> str:
        """API key for ``provider`` (default: the configured extraction provider)."""
        if (provider or self.extraction_provider) == "anthropic":
            return self.anthropic_api_key
        return self.google_api_key


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or one-off runs).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
