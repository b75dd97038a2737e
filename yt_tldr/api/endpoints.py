"""
API endpoints for video summarization and model listing.
"""
import time

from fastapi import APIRouter, Depends, Request
from loguru import logger

from yt_tldr.api.dependencies import get_llm_provider, get_worker_pool
from yt_tldr.core.exceptions import AppException
from yt_tldr.core.providers.llm_provider import LLMProvider
from yt_tldr.models import ModelsResponse, SummarizeRequest, SummarizeResponse
from yt_tldr.services.dispatcher import WorkerPool


router = APIRouter()


@router.post("/summarize", response_model=SummarizeResponse)
async def summarize_video(
    request: Request,
    payload: SummarizeRequest,
    worker_pool: WorkerPool = Depends(get_worker_pool),
):
    """
    Summarizes a YouTube video from its captions.

    The request runs on the worker pool; if every worker is busy and the
    waiting queue is full the call fails fast with 503.

    Args:
        request: FastAPI request object (used to detect client disconnects).
        payload: URL, model, system prompt and mode flags.
        worker_pool: The bounded pool executing the pipeline.

    Returns:
        SummarizeResponse: video name, Markdown summary and raw transcript.
    """
    logger.info(
        f"Incoming request for URL: {payload.url} "
        f"(model={payload.model or 'default'}, dry_run={payload.dry_run}, "
        f"transcript_only={payload.transcript_only})"
    )

    start_time = time.perf_counter()
    result = await worker_pool.submit(payload, is_disconnected=request.is_disconnected)
    duration = time.perf_counter() - start_time
    logger.info(f"Summarization completed in {duration:.2f}s")
    return result


@router.get("/models", response_model=ModelsResponse)
async def list_models(llm_provider: LLMProvider = Depends(get_llm_provider)):
    """
    Lists models installed on the inference backend.

    Never fails: when the backend cannot be queried the list is empty.
    """
    try:
        models = await llm_provider.list_models()
    except AppException as e:
        logger.warning(f"Model listing failed: {e.detail}")
        models = []
    return ModelsResponse(models=models)
