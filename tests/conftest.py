"""
Shared pytest fixtures and configuration.
"""
import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from yt_tldr.core.config import Settings
from yt_tldr.core.providers.llm_provider import LLMProvider, LLMResponse
from yt_tldr.core.providers.transcript_provider import TranscriptProvider
from yt_tldr.main import create_app
from yt_tldr.models import TranscriptDocument

VIDEO_ID = "abc12345678"
VIDEO_URL = f"https://www.youtube.com/watch?v={VIDEO_ID}"


@pytest.fixture
def settings():
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        TLDR_WORKERS=2,
        TLDR_QUEUE_SIZE=4,
        OLLAMA_BASE_URL="http://ollama.test:11434",
        DEFAULT_MODEL="default-model",
    )


@pytest.fixture
def transcript_document():
    return TranscriptDocument(
        video_id=VIDEO_ID, title="Test Video", text="Hello world.", language="en"
    )


@pytest.fixture
def mock_transcript_provider(transcript_document):
    """Transcript source double that records every fetch."""
    provider = AsyncMock(spec=TranscriptProvider)
    provider.fetch.return_value = transcript_document
    return provider


@pytest.fixture
def mock_llm_provider():
    """Inference backend double that records every call."""
    provider = AsyncMock(spec=LLMProvider)
    provider.generate_text.return_value = LLMResponse(
        content="## Mocked Summary Content", model="m1"
    )
    provider.list_models.return_value = ["m1", "llama3:8b"]
    return provider


@pytest.fixture
def app(settings, mock_transcript_provider, mock_llm_provider):
    return create_app(
        settings,
        transcript_provider=mock_transcript_provider,
        llm_provider=mock_llm_provider,
    )


@pytest.fixture
def client(app):
    return TestClient(app)
