"""
YouTube service for fetching video titles and caption transcripts.
"""
import asyncio
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import httpx
from loguru import logger
from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError, ExtractorError

from yt_tldr.core.exceptions import TranscriptNetworkError, TranscriptUnavailableError
from yt_tldr.core.providers.transcript_provider import TranscriptProvider
from yt_tldr.models import (
    CaptionTrack,
    TranscriptDocument,
    TranscriptSegment,
    VideoReference,
    YtDlpInfo,
)

# Pseudo-track yt-dlp lists next to real subtitles
_IGNORED_TRACKS = {"live_chat"}


class _YtDlpLogger:
    """Routes yt-dlp output into loguru."""

    def debug(self, msg: str) -> None:
        logger.debug(f"yt-dlp: {msg}")

    def info(self, msg: str) -> None:
        logger.debug(f"yt-dlp: {msg}")

    def warning(self, msg: str) -> None:
        logger.warning(f"yt-dlp: {msg}")

    def error(self, msg: str) -> None:
        logger.error(f"yt-dlp: {msg}")


class YouTubeService(TranscriptProvider):
    """
    Transcript provider backed by YouTube captions.

    This service handles:
    1. Reading video metadata (title, caption track listing) with yt-dlp.
    2. Selecting the best caption track for the preferred languages.
    3. Downloading the track in json3 format and flattening it to plain text.

    Nothing is cached and nothing is retried: a failure is reported to the
    caller as-is.
    """

    def __init__(
        self,
        languages: List[str],
        timeout: float = 30,
        proxy_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the YouTubeService.

        Args:
            languages: Preferred caption languages, most preferred first.
            timeout: Upper bound in seconds for one whole fetch; 0 disables it.
            proxy_url: Optional HTTP(S) proxy for every YouTube request.
            transport: Optional httpx transport (used by tests).
        """
        self.languages = list(languages) or ["en"]
        self.timeout = timeout
        self.proxy_url = proxy_url
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout or None),
            proxy=proxy_url,
            transport=transport,
            follow_redirects=True,
        )

    def _extract_info_sync(self, ref: VideoReference) -> Dict[str, Any]:
        """
        Synchronous helper to read raw video info using yt-dlp.

        Args:
            ref: The video to look up.

        Returns:
            The unprocessed info dict from the YouTube extractor.
        """
        ydl_opts = {
            "quiet": True,
            "no_warnings": True,
            "skip_download": True,
            # No automatic retries
            "retries": 0,
            "extractor_retries": 0,
            "logger": _YtDlpLogger(),
        }
        if self.proxy_url:
            ydl_opts["proxy"] = self.proxy_url

        try:
            with YoutubeDL(ydl_opts) as ydl:
                info = ydl.extract_info(ref.watch_url, download=False, process=False)
        except DownloadError as e:
            cause = e.exc_info[1] if e.exc_info else None
            reason = str(e).removeprefix("ERROR: ")
            if isinstance(cause, ExtractorError) and cause.expected:
                raise TranscriptUnavailableError(ref.id, reason) from e
            raise TranscriptNetworkError(ref.id, reason) from e

        if not info:
            raise TranscriptUnavailableError(ref.id, "Video details not found")
        return info

    async def fetch(self, ref: VideoReference) -> TranscriptDocument:
        """
        Fetch the transcript and title for a video, bounded by the timeout.

        Raises:
            TranscriptUnavailableError: No usable captions or missing video.
            TranscriptNetworkError: Transport failure or timeout.
        """
        try:
            if self.timeout:
                return await asyncio.wait_for(self._fetch(ref), self.timeout)
            return await self._fetch(ref)
        except asyncio.TimeoutError as e:
            raise TranscriptNetworkError(
                ref.id, f"timed out after {self.timeout:g} seconds"
            ) from e

    async def _fetch(self, ref: VideoReference) -> TranscriptDocument:
        logger.info(f"Fetching video info for {ref.id}")
        # Run blocking yt-dlp call in thread pool
        info = await asyncio.to_thread(self._extract_info_sync, ref)
        video = YtDlpInfo(**info)

        track = select_caption_track(info, self.languages)
        if track is None:
            raise TranscriptUnavailableError(ref.id, "No captions found for this video")

        kind = "Automatic" if track.is_generated else "Manual"
        logger.info(f"Video {ref.id}: Using {kind} transcript in '{track.language}'")

        segments = await self._download_segments(ref, track)
        document = TranscriptDocument.from_segments(
            ref.id, segments, title=video.title, language=track.language
        )
        if not document.text:
            raise TranscriptUnavailableError(ref.id, "Caption track is empty")

        logger.info(
            f"Fetched transcript for {ref.id}: {len(segments)} segments, "
            f"{len(document.text)} characters"
        )
        return document

    async def _download_segments(
        self, ref: VideoReference, track: CaptionTrack
    ) -> List[TranscriptSegment]:
        try:
            response = await self.client.get(track.url)
        except httpx.TransportError as e:
            raise TranscriptNetworkError(ref.id, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise TranscriptNetworkError(
                ref.id, f"Caption download failed with HTTP {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise TranscriptUnavailableError(ref.id, "Caption data could not be parsed") from e

        return parse_json3(payload)

    async def aclose(self) -> None:
        await self.client.aclose()


def select_caption_track(info: Dict[str, Any], languages: List[str]) -> Optional[CaptionTrack]:
    """
    Pick the caption track to summarize.

    For each preferred language a manually authored track wins over an
    automatic one. If no preferred language is available, the first manual
    track in any language is used, then the automatic track in the video's
    original language.
    """
    manual = _tracks(info.get("subtitles"))
    automatic = _tracks(info.get("automatic_captions"))

    for language in languages:
        for tracks, generated in ((manual, False), (automatic, True)):
            code = _match_language(tracks, language)
            if code is not None:
                return CaptionTrack(
                    language=code, url=tracks[code], is_generated=generated
                )

    for code, url in manual.items():
        logger.warning(f"No captions in {languages}, falling back to manual '{code}'")
        return CaptionTrack(language=code, url=url, is_generated=False)

    for code, url in automatic.items():
        if code.endswith("-orig"):
            logger.warning(f"No captions in {languages}, falling back to automatic '{code}'")
            return CaptionTrack(language=code, url=url, is_generated=True)

    return None


def _tracks(listing: Any) -> Dict[str, str]:
    """Map language code to a json3 caption URL."""
    tracks: Dict[str, str] = {}
    if not isinstance(listing, dict):
        return tracks
    for code, formats in listing.items():
        if code in _IGNORED_TRACKS or not isinstance(formats, list):
            continue
        url = _json3_url(formats)
        if url:
            tracks[code] = url
    return tracks


def _match_language(tracks: Dict[str, str], language: str) -> Optional[str]:
    if language in tracks:
        return language
    for code in tracks:
        if code.split("-")[0] == language:
            return code
    return None


def _json3_url(formats: List[Any]) -> Optional[str]:
    entries = [f for f in formats if isinstance(f, dict) and f.get("url")]
    for entry in entries:
        if entry.get("ext") == "json3":
            return entry["url"]
    if not entries:
        return None

    parts = urlsplit(entries[0]["url"])
    query = [(k, v) for k, v in parse_qsl(parts.query) if k != "fmt"]
    query.append(("fmt", "json3"))
    return urlunsplit(parts._replace(query=urlencode(query)))


def parse_json3(payload: Any) -> List[TranscriptSegment]:
    """
    Flatten a json3 caption document into text segments.

    Timing metadata is kept on the segment models only; events without text
    (window/positioning events) are dropped.
    """
    segments: List[TranscriptSegment] = []
    events = payload.get("events") if isinstance(payload, dict) else None

    for event in events or []:
        if not isinstance(event, dict) or not event.get("segs"):
            continue
        text = " ".join(
            seg["utf8"].strip()
            for seg in event["segs"]
            if isinstance(seg, dict) and isinstance(seg.get("utf8"), str) and seg["utf8"].strip()
        )
        if text:
            segments.append(
                TranscriptSegment(
                    text=text,
                    start=event.get("tStartMs", 0) / 1000,
                    duration=event.get("dDurationMs", 0) / 1000,
                )
            )

    return segments
