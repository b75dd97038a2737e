"""
Pydantic models for API request/response schemas.
"""
from typing import List

from pydantic import BaseModel, ConfigDict


class SummarizeRequest(BaseModel):
    """Request body for ``POST /api/summarize``."""

    url: str
    model: str
    system_prompt: str
    dry_run: bool = False
    transcript_only: bool = False

    model_config = ConfigDict(extra="ignore")


class SummarizeResponse(BaseModel):
    """Successful summarization result."""

    video_name: str
    summary: str
    subtitles: str

    model_config = ConfigDict(frozen=True)


class ModelsResponse(BaseModel):
    """Model names installed on the inference backend."""

    models: List[str]


class HealthResponse(BaseModel):
    """Liveness and worker pool occupancy."""

    status: str
    project: str
    workers: int
    in_flight: int
    queued: int
