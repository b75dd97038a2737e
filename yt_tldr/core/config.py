"""
Application configuration using pydantic-settings.
"""
import os
from functools import lru_cache
from typing import List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_workers() -> int:
    return os.cpu_count() or 4


class Settings(BaseSettings):
    """Process-wide settings, read once from the environment at startup."""

    PROJECT_NAME: str = "YouTube TLDR"

    # HTTP server
    TLDR_IP: str = "0.0.0.0"
    TLDR_PORT: int = Field(default=8001, ge=1, le=65535)

    # Worker pool
    TLDR_WORKERS: int = Field(default_factory=_default_workers, ge=1)
    TLDR_QUEUE_SIZE: int = Field(default=100, ge=0)  # 0 = unbounded

    # Inference backend (Ollama)
    OLLAMA_BASE_URL: str = "http://127.0.0.1:11434"
    OLLAMA_TIMEOUT_SECS: float = Field(default=0, ge=0)  # 0 = no timeout
    OLLAMA_MODELS_TIMEOUT_SECS: float = Field(default=5, gt=0)
    DEFAULT_MODEL: str = "gpt-oss:20b"

    # Transcript retrieval
    TRANSCRIPT_LANGUAGES: Union[List[str], str] = ["en"]
    TRANSCRIPT_TIMEOUT_SECS: float = Field(default=30, ge=0)  # 0 = no timeout
    TRANSCRIPT_PROXY_URL: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    @field_validator("TRANSCRIPT_LANGUAGES", mode="before")
    @classmethod
    def split_languages(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @field_validator("OLLAMA_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Build the settings object once per process."""
    return Settings()
