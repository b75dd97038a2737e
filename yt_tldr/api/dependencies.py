"""
Dependency providers for FastAPI.

Components are built once by ``create_app()`` and stored on ``app.state``;
these functions hand them to the endpoints.
"""
from fastapi import Request

from yt_tldr.core.config import Settings
from yt_tldr.core.providers.llm_provider import LLMProvider
from yt_tldr.services.dispatcher import WorkerPool


def get_app_settings(request: Request) -> Settings:
    """Get the settings the application was built with."""
    return request.app.state.settings


def get_worker_pool(request: Request) -> WorkerPool:
    """Get the worker pool that runs summarization requests."""
    return request.app.state.worker_pool


def get_llm_provider(request: Request) -> LLMProvider:
    """Get the inference provider (used directly for model listing)."""
    return request.app.state.llm_provider
