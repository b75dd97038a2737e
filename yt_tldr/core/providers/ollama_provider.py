"""
Ollama implementation of LLMProvider.

Talks to the Ollama REST API (``/api/chat`` and ``/api/tags``) with httpx.
"""
from typing import Any, Optional

import httpx
from loguru import logger

from yt_tldr.core.constants import OllamaConfig
from yt_tldr.core.exceptions import (
    AppException,
    BackendError,
    BackendTimeoutError,
    BackendUnavailableError,
)
from yt_tldr.core.providers.llm_provider import LLMMessage, LLMProvider, LLMResponse


class OllamaProvider(LLMProvider):
    """
    Ollama implementation of LLMProvider.

    Every chat call is a single non-streaming request. A timeout of zero
    disables the client-side timeout entirely, since long-context local
    inference can legitimately take minutes.

    Example:
        provider = OllamaProvider(base_url="http://127.0.0.1:11434", timeout=120)
        response = await provider.generate_text(messages, model="gpt-oss:20b")
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 0,
        models_timeout: float = 5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Ollama provider.

        Args:
            base_url: Ollama server URL, e.g. "http://127.0.0.1:11434".
            timeout: Seconds allowed for a chat call; 0 disables the timeout.
            models_timeout: Fixed ceiling for model listing.
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.models_timeout = models_timeout
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout or None),
            transport=transport,
        )

    async def generate_text(self, messages: list[LLMMessage], model: str) -> LLMResponse:
        """Generate a chat completion using Ollama."""
        payload = {
            "model": model,
            "messages": [
                {"role": msg.role.value, "content": msg.content} for msg in messages
            ],
            "stream": False,
        }

        logger.debug(f"Sending chat request to Ollama ({model})")
        try:
            response = await self.client.post(OllamaConfig.CHAT_PATH, json=payload)
        except httpx.TimeoutException as e:
            if self.timeout:
                raise BackendTimeoutError(self.timeout) from e
            raise BackendUnavailableError(self.base_url, _describe(e)) from e
        except httpx.TransportError as e:
            raise BackendUnavailableError(self.base_url, _describe(e)) from e

        if not response.is_success:
            message = _error_text(response)
            if response.status_code == 404 or "not found" in message.lower():
                message = await self._model_not_found_hint(model, message)
            raise BackendError(message, status=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise BackendError(
                f"Malformed response body: {response.text[:OllamaConfig.ERROR_BODY_LIMIT]}"
            ) from e

        content = _message_content(data)
        if not content:
            raise BackendError("No text in response")

        usage = None
        if isinstance(data, dict) and "eval_count" in data:
            usage = {
                "prompt_tokens": int(data.get("prompt_eval_count") or 0),
                "completion_tokens": int(data.get("eval_count") or 0),
            }
            logger.debug(f"Ollama token usage: {usage}")

        return LLMResponse(
            content=content,
            model=str(data.get("model") or model),
            usage=usage,
        )

    async def list_models(self) -> list[str]:
        """List installed model names via ``/api/tags``."""
        try:
            response = await self.client.get(
                OllamaConfig.TAGS_PATH, timeout=self.models_timeout
            )
        except httpx.TransportError as e:
            raise BackendUnavailableError(self.base_url, _describe(e)) from e

        if not response.is_success:
            raise BackendError(_error_text(response), status=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise BackendError("Malformed model list") from e

        models = data.get("models") if isinstance(data, dict) else None
        return [
            item["name"]
            for item in models or []
            if isinstance(item, dict) and isinstance(item.get("name"), str)
        ]

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _model_not_found_hint(self, model: str, message: str) -> str:
        try:
            installed = await self.list_models()
        except AppException as e:
            logger.debug(f"Could not list models for hint: {e.detail}")
            return message

        if installed:
            suggestion = f"Installed models: {', '.join(installed)}"
        else:
            suggestion = "No local models found. Pull one, e.g.: ollama pull llama3:8b"
        return f"Model '{model}' not found. Pull it with: ollama pull {model}. {suggestion}"


def _describe(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


def _error_text(response: httpx.Response) -> str:
    """Prefer Ollama's ``{"error": ...}`` message, fall back to the raw body."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("error"), str):
        return data["error"]
    return response.text[:OllamaConfig.ERROR_BODY_LIMIT] or response.reason_phrase


def _message_content(data: Any) -> str:
    if not isinstance(data, dict):
        return ""
    message = data.get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content if isinstance(content, str) else ""
