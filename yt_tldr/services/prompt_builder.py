from typing import Optional

from yt_tldr.core.prompts import SummarizationPrompts
from yt_tldr.core.providers.llm_provider import LLMMessage
from yt_tldr.models import LLMRole


def build_messages(
    system_prompt: str, title: Optional[str], transcript: str
) -> list[LLMMessage]:
    """
    Build the two-message chat payload for a summary.

    The system prompt is passed through untouched; the user message carries
    the title (when known) followed by the transcript.
    """
    if title and title.strip():
        header = SummarizationPrompts.TITLE_HEADER.format(title=title.strip())
        user_content = f"{header}\n\n{transcript}"
    else:
        user_content = transcript

    return [
        LLMMessage(role=LLMRole.SYSTEM, content=system_prompt),
        LLMMessage(role=LLMRole.USER, content=user_content),
    ]
