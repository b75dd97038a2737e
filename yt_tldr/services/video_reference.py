"""
Parsing of user supplied YouTube links into canonical video references.
"""
import re
from typing import Optional
from urllib.parse import parse_qs, urlsplit

from yt_tldr.core.constants import YouTubeConfig
from yt_tldr.core.exceptions import InvalidUrlError
from yt_tldr.models import VideoReference

_VIDEO_ID_RE = re.compile(r"[A-Za-z0-9_-]{%d}" % YouTubeConfig.VIDEO_ID_LENGTH)


def is_video_id(value: str) -> bool:
    """Return True if ``value`` is exactly one well-formed video id."""
    return _VIDEO_ID_RE.fullmatch(value) is not None


def _extract_candidate(value: str) -> Optional[str]:
    """
    Pull the raw id candidate out of a YouTube URL.

    Query strings and fragments are separated by ``urlsplit``, so whatever
    follows the id is never part of the candidate.
    """
    if "://" not in value:
        value = f"https://{value}"

    try:
        parts = urlsplit(value)
        host = (parts.hostname or "").lower()
    except ValueError:
        return None

    segments = [segment for segment in parts.path.split("/") if segment]

    if host in YouTubeConfig.HOSTS:
        ids = parse_qs(parts.query).get("v")
        if ids:
            return ids[0]
        if len(segments) >= 2 and segments[0] in YouTubeConfig.PATH_PREFIXES:
            return segments[1]
        return None

    if host in YouTubeConfig.SHORT_HOSTS and segments:
        return segments[0]

    return None


def resolve(value: str) -> VideoReference:
    """
    Resolve a bare id or any supported YouTube URL to a VideoReference.

    Accepted forms, in priority order: a bare 11 character id,
    ``youtube.com/watch?v=ID``, ``youtu.be/ID`` and the ``/embed/``,
    ``/shorts/``, ``/v/`` and ``/live/`` path forms.

    Raises:
        InvalidUrlError: No well-formed id could be extracted.
    """
    text = (value or "").strip()

    if is_video_id(text):
        return VideoReference(id=text)

    candidate = _extract_candidate(text) if text else None
    if candidate is None or not is_video_id(candidate):
        raise InvalidUrlError(value)

    return VideoReference(id=candidate)
