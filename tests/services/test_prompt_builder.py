from yt_tldr.models import LLMRole
from yt_tldr.services.prompt_builder import build_messages


def test_system_prompt_is_verbatim():
    prompt = "  Summarize as **bullets**.\n\nNo intro.  "

    messages = build_messages(prompt, "Title", "text")

    assert messages[0].role == LLMRole.SYSTEM
    assert messages[0].content == prompt


def test_title_precedes_transcript():
    messages = build_messages("p", "My Video", "Hello world.")

    assert messages[1].role == LLMRole.USER
    assert messages[1].content == "Title: My Video\n\nHello world."


def test_without_title_only_transcript():
    assert build_messages("p", None, "Hello world.")[1].content == "Hello world."
    assert build_messages("p", "   ", "Hello world.")[1].content == "Hello world."
