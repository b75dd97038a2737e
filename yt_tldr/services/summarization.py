"""
Single-video summarization pipeline.

Steps run strictly in order for each request:

1. Resolve the URL to a video reference.
2. Fetch the transcript (and title).
3. Build the chat messages from the system prompt, title and transcript.
4. Ask the inference provider for one complete summary.

Any failure is terminal for the request; there are no partial results
and no retries.
"""
import time

from loguru import logger

from yt_tldr.core.prompts import SummarizationPrompts
from yt_tldr.core.providers.llm_provider import LLMProvider
from yt_tldr.core.providers.transcript_provider import TranscriptProvider
from yt_tldr.models import SummarizeRequest, SummarizeResponse
from yt_tldr.services.prompt_builder import build_messages
from yt_tldr.services.video_reference import resolve


class SummarizationService:
    """
    Turns a summarization request into a complete result.

    Modes:
    - **dry_run**: stops after the transcript fetch and returns an empty
      summary. Used to check connectivity without touching the backend.
    - **transcript_only**: returns the transcript itself as the summary,
      again without an inference call.
    - default: one non-streaming chat completion.
    """

    def __init__(
        self,
        transcript_provider: TranscriptProvider,
        llm_provider: LLMProvider,
        default_model: str,
    ):
        """
        Initialize the summarization service.

        Args:
            transcript_provider: Source of video transcripts.
            llm_provider: Inference backend client.
            default_model: Model used when a request leaves it blank.
        """
        self.transcript_provider = transcript_provider
        self.llm_provider = llm_provider
        self.default_model = default_model

    async def summarize(self, request: SummarizeRequest) -> SummarizeResponse:
        """
        Run the pipeline for one request.

        Args:
            request: The validated API request.

        Returns:
            SummarizeResponse with the video name, summary and transcript.
        """
        ref = resolve(request.url)
        logger.info(f"Resolved {request.url!r} to video {ref.id}")

        document = await self.transcript_provider.fetch(ref)
        video_name = document.title or ref.id

        if request.dry_run:
            logger.info(f"Dry run for {ref.id}: skipping inference")
            return SummarizeResponse(
                video_name=video_name, summary="", subtitles=document.text
            )

        if request.transcript_only:
            logger.info(f"Transcript-only request for {ref.id}: skipping inference")
            return SummarizeResponse(
                video_name=video_name, summary=document.text, subtitles=document.text
            )

        model = request.model.strip() or self.default_model
        system_prompt = request.system_prompt
        if not system_prompt.strip():
            system_prompt = SummarizationPrompts.DEFAULT_SYSTEM_PROMPT

        messages = build_messages(system_prompt, document.title, document.text)
        logger.info(f"Sending {len(document.text)} transcript characters to model {model}")

        start_time = time.perf_counter()
        response = await self.llm_provider.generate_text(messages, model=model)
        duration = time.perf_counter() - start_time
        logger.info(f"Received {len(response.content)} summary characters in {duration:.2f}s")

        return SummarizeResponse(
            video_name=video_name,
            summary=response.content,
            subtitles=document.text,
        )
