"""
Provider abstraction layer for swappable transcript and inference backends.
"""
from yt_tldr.core.providers.llm_provider import (
    LLMProvider,
    LLMMessage,
    LLMResponse,
)
from yt_tldr.core.providers.transcript_provider import (
    TranscriptProvider,
)

__all__ = [
    # LLM
    "LLMProvider",
    "LLMMessage",
    "LLMResponse",
    # Transcripts
    "TranscriptProvider",
]
