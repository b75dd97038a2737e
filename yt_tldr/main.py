"""
Application factory and server entry point.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from loguru import logger

from yt_tldr.api.dependencies import get_app_settings, get_worker_pool
from yt_tldr.api.endpoints import router as api_router
from yt_tldr.core.config import Settings, get_settings
from yt_tldr.core.exceptions import (
    AppException,
    app_exception_handler,
    validation_exception_handler,
)
from yt_tldr.core.logging import setup_logging
from yt_tldr.core.middleware import RequestContextMiddleware
from yt_tldr.core.providers.llm_provider import LLMProvider
from yt_tldr.core.providers.ollama_provider import OllamaProvider
from yt_tldr.core.providers.transcript_provider import TranscriptProvider
from yt_tldr.models import HealthResponse
from yt_tldr.services.dispatcher import WorkerPool
from yt_tldr.services.summarization import SummarizationService
from yt_tldr.services.youtube import YouTubeService

STATIC_DIR = Path(__file__).parent / "static"


def create_app(
    settings: Optional[Settings] = None,
    transcript_provider: Optional[TranscriptProvider] = None,
    llm_provider: Optional[LLMProvider] = None,
) -> FastAPI:
    """
    Build the FastAPI application and wire its components.

    Args:
        settings: Configuration; read from the environment when omitted.
        transcript_provider: Transcript source; YouTube when omitted.
        llm_provider: Inference backend; Ollama when omitted.
    """
    settings = settings or get_settings()

    if transcript_provider is None:
        transcript_provider = YouTubeService(
            languages=settings.TRANSCRIPT_LANGUAGES,
            timeout=settings.TRANSCRIPT_TIMEOUT_SECS,
            proxy_url=settings.TRANSCRIPT_PROXY_URL,
        )
    if llm_provider is None:
        llm_provider = OllamaProvider(
            base_url=settings.OLLAMA_BASE_URL,
            timeout=settings.OLLAMA_TIMEOUT_SECS,
            models_timeout=settings.OLLAMA_MODELS_TIMEOUT_SECS,
        )

    service = SummarizationService(
        transcript_provider=transcript_provider,
        llm_provider=llm_provider,
        default_model=settings.DEFAULT_MODEL,
    )
    worker_pool = WorkerPool(
        service=service,
        workers=settings.TLDR_WORKERS,
        queue_size=settings.TLDR_QUEUE_SIZE,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
        logger.info(f"🚀 {settings.PROJECT_NAME} at http://{settings.TLDR_IP}:{settings.TLDR_PORT}")
        logger.info(
            f"Worker pool: {settings.TLDR_WORKERS} workers, "
            f"queue size {settings.TLDR_QUEUE_SIZE or 'unbounded'}"
        )
        logger.info(
            f"Ollama backend: {settings.OLLAMA_BASE_URL} "
            f"(timeout {settings.OLLAMA_TIMEOUT_SECS or 'disabled'})"
        )
        yield
        await transcript_provider.aclose()
        await llm_provider.aclose()
        logger.info("🛑 Application shutdown")

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.llm_provider = llm_provider
    app.state.worker_pool = worker_pool

    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.add_middleware(RequestContextMiddleware)

    app.include_router(api_router, prefix="/api")

    @app.get("/health", response_model=HealthResponse)
    async def health_check(
        app_settings: Settings = Depends(get_app_settings),
        worker_pool: WorkerPool = Depends(get_worker_pool),
    ):
        return HealthResponse(
            status="ok",
            project=app_settings.PROJECT_NAME,
            workers=worker_pool.workers,
            in_flight=worker_pool.in_flight,
            queued=worker_pool.queued,
        )

    # Registered last so API routes take precedence; also serves GET / for health checks
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.TLDR_IP,
        port=settings.TLDR_PORT,
        log_config=None,
    )


if __name__ == "__main__":
    run()
