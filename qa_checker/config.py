"""
Configuration management for the Q&A Checker.

Settings come from environment variables or a .env file, validated by
pydantic-settings. One Settings object is built per process and handed to
the components that need it; the scoring endpoint is never read from
module globals.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Q&A Checker settings.

    Only `LLM_API_KEY` is required; everything else has a working default.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Scoring Oracle (OpenAI-compatible endpoint)
    # ==========================================================================
    llm_api_key: str = Field(
        ...,
        description="API key for the OpenAI-compatible scoring endpoint",
        min_length=10,
    )

    llm_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL for the scoring endpoint",
    )

    llm_model: str = Field(
        default="gpt-4o-mini",
        description="Model used to score answers",
    )

    llm_temperature: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Temperature for LLM generation (0.0 = deterministic)",
    )

    llm_max_tokens: int = Field(
        default=1024,
        ge=16,
        description="Maximum tokens in a scoring response",
    )

    oracle_max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum calls to the oracle per question",
    )

    oracle_backoff_base_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="First backoff delay when the oracle reports it is overloaded; doubles per attempt",
    )

    # ==========================================================================
    # Uploads and Records
    # ==========================================================================
    max_file_size_mb: float = Field(
        default=10.0,
        ge=0.1,
        le=100.0,
        description="Maximum allowed upload size in megabytes",
    )

    supported_extensions: tuple[str, ...] = Field(
        default=(".pdf", ".docx", ".txt", ".md"),
        description="Supported file extensions for document extraction",
    )

    upload_directory: Path = Field(
        default=Path("./uploads"),
        description="Directory where uploaded documents are stored",
    )

    data_directory: Path = Field(
        default=Path("./data"),
        description="Directory for quiz and submission records",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level for the CLI and server",
    )

    @field_validator("llm_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Endpoint paths are appended by the SDK; a trailing slash would double up."""
        return v.rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @field_validator("upload_directory", "data_directory")
    @classmethod
    def validate_directory(cls, v: Path) -> Path:
        """Ensure the directory exists or can be created."""
        v.mkdir(parents=True, exist_ok=True)
        return v


@lru_cache()
def get_settings() -> Settings:
    """Settings for this process, read from the environment on first use."""
    return Settings()
