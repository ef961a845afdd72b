"""Centralized configuration for cercami using Pydantic Settings."""

import logging
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


PostingsBackend = Literal["bitmap", "sorted-array"]
StemmerName = Literal["snowball", "porter", "none"]
TraceExporter = Literal["console", "none"]


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``CERCAMI_*`` environment variables.

    Command line flags override individual fields via ``model_copy(update=...)``.
    """

    model_config = SettingsConfigDict(
        env_prefix="CERCAMI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",  # Ignore extra env vars not defined in model
    )

    # Index settings
    postings_backend: PostingsBackend = Field(
        default="bitmap",
        description="Postings representation: 'bitmap' (integer bit-set) or 'sorted-array'",
    )
    stemmer: StemmerName = Field(default="snowball", description="Stemming algorithm applied to index terms")
    store_documents: bool = Field(
        default=True,
        description="Keep title/url/text per document so results can be rendered",
    )

    # Corpus shape
    document_tag: str = Field(default="doc", min_length=1, description="Element name of one corpus entry")
    title_field: str = Field(default="title", min_length=1, description="Child element holding the title")
    url_field: str = Field(default="url", min_length=1, description="Child element holding the url")
    text_field: str = Field(default="abstract", min_length=1, description="Child element holding the indexed text")

    # Logging
    log_level: str = Field(default="warning", description="Logging level")
    log_json: bool = Field(default=False, description="Emit structured JSON log lines")
    log_every: int = Field(default=10000, ge=1, description="Log corpus progress every N documents")

    # Tracing
    tracing_enabled: bool = Field(default=False, description="Wrap build and search phases in OpenTelemetry spans")
    tracing_exporter: TraceExporter = Field(
        default="console",
        description="Where finished spans go: 'console' (JSON on stderr) or 'none' (in process only)",
    )
    service_name: str = Field(default="cercami", min_length=1, description="Service name reported on spans")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level '{value}'")
        return normalized.lower()

    def corpus_fields(self) -> tuple[str, str, str]:
        """Return the (title, url, text) element names in that order."""
        return self.title_field, self.url_field, self.text_field
