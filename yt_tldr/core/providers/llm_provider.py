"""
Abstract base class for inference providers.

This module defines a vendor-neutral interface for chat-completion
backends. The summarization pipeline depends only on this interface, so
tests can substitute a double for the real Ollama client.
"""
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel, ConfigDict

from yt_tldr.models.enums import LLMRole


class LLMMessage(BaseModel):
    """Vendor-neutral message format for chat requests."""

    role: LLMRole
    content: str

    model_config = ConfigDict(frozen=True)


class LLMResponse(BaseModel):
    """Standardized response from an inference provider."""

    content: str
    model: str
    usage: Optional[dict[str, int]] = None

    model_config = ConfigDict(frozen=True)


class LLMProvider(ABC):
    """
    Abstract interface for inference providers.

    Implementations must provide:
    - generate_text: a single, non-streaming chat completion
    - list_models: names of the models the backend can serve

    Example:
        provider = OllamaProvider(base_url="http://127.0.0.1:11434")
        response = await provider.generate_text(
            [
                LLMMessage(role=LLMRole.SYSTEM, content="Summarize."),
                LLMMessage(role=LLMRole.USER, content=transcript),
            ],
            model="llama3:8b",
        )
        print(response.content)
    """

    @abstractmethod
    async def generate_text(self, messages: list[LLMMessage], model: str) -> LLMResponse:
        """
        Generate a chat completion.

        Args:
            messages: Conversation messages, system prompt first.
            model: Backend model name.

        Returns:
            LLMResponse containing the generated content and metadata.

        Raises:
            BackendUnavailableError: The backend cannot be reached.
            BackendTimeoutError: The configured timeout elapsed.
            BackendError: The backend returned an error or unusable body.
        """
        ...

    @abstractmethod
    async def list_models(self) -> list[str]:
        """
        List model names installed on the backend.

        Raises:
            BackendUnavailableError: The backend cannot be reached.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources held by the provider."""
        return None
