import time

import httpx
import pytest
from yt_dlp.utils import DownloadError, ExtractorError

from yt_tldr.core.exceptions import TranscriptNetworkError, TranscriptUnavailableError
from yt_tldr.models import VideoReference
from yt_tldr.services import youtube
from yt_tldr.services.youtube import YouTubeService, parse_json3, select_caption_track

REF = VideoReference(id="abc12345678")

JSON3 = {
    "wireMagic": "pb3",
    "events": [
        {"tStartMs": 0, "dDurationMs": 5000, "id": 1, "wpWinPosId": 1},
        {"tStartMs": 0, "dDurationMs": 1200, "segs": [{"utf8": "Hello"}, {"utf8": " world."}]},
        {"tStartMs": 1200, "dDurationMs": 10, "aAppend": 1, "segs": [{"utf8": "\n"}]},
        {"tStartMs": 1300, "dDurationMs": 900, "segs": [{"utf8": "  How   are "}, {"utf8": "you?"}]},
    ],
}


def caption_formats(url: str):
    return [
        {"ext": "srv1", "url": url + "&fmt=srv1"},
        {"ext": "json3", "url": url + "&fmt=json3"},
    ]


def video_info(subtitles=None, automatic=None, title="Test Video"):
    return {
        "id": REF.id,
        "title": title,
        "subtitles": subtitles or {},
        "automatic_captions": automatic or {},
    }


def make_service(handler=None, timeout: float = 30, info=None) -> YouTubeService:
    handler = handler or (lambda request: httpx.Response(200, json=JSON3))
    service = YouTubeService(
        languages=["en"], timeout=timeout, transport=httpx.MockTransport(handler)
    )
    if info is not None:
        service._extract_info_sync = lambda ref: info
    return service


def test_parse_json3_drops_metadata_and_blank_segments():
    segments = parse_json3(JSON3)

    assert [s.text for s in segments] == ["Hello world.", "How   are you?"]
    assert segments[1].start == 1.3
    assert segments[1].duration == 0.9


def test_parse_json3_tolerates_garbage():
    assert parse_json3({}) == []
    assert parse_json3([]) == []
    assert parse_json3({"events": [None, {"segs": [{"utf8": 5}]}]}) == []


def test_manual_track_preferred_over_automatic():
    info = video_info(
        subtitles={"en": caption_formats("https://yt.test/manual?lang=en")},
        automatic={"en": caption_formats("https://yt.test/asr?lang=en")},
    )

    track = select_caption_track(info, ["en"])

    assert track.url == "https://yt.test/manual?lang=en&fmt=json3"
    assert track.is_generated is False


def test_automatic_track_in_preferred_language():
    info = video_info(
        subtitles={"de": caption_formats("https://yt.test/manual?lang=de")},
        automatic={"en": caption_formats("https://yt.test/asr?lang=en")},
    )

    track = select_caption_track(info, ["en"])

    assert track.language == "en"
    assert track.is_generated is True


def test_regional_variant_matches_language():
    info = video_info(subtitles={"en-US": caption_formats("https://yt.test/manual?lang=en-US")})

    assert select_caption_track(info, ["en"]).language == "en-US"


def test_language_order_is_respected():
    info = video_info(
        subtitles={
            "en": caption_formats("https://yt.test/manual?lang=en"),
            "de": caption_formats("https://yt.test/manual?lang=de"),
        }
    )

    assert select_caption_track(info, ["de", "en"]).language == "de"


def test_fallback_to_other_language():
    info = video_info(
        subtitles={"live_chat": caption_formats("https://yt.test/chat?x=1")},
        automatic={
            "fr": caption_formats("https://yt.test/asr?lang=fr&tlang=fr"),
            "es-orig": caption_formats("https://yt.test/asr?lang=es"),
        },
    )

    track = select_caption_track(info, ["en"])

    assert track.language == "es-orig"
    assert track.is_generated is True


def test_no_captions_selects_nothing():
    assert select_caption_track(video_info(), ["en"]) is None
    assert select_caption_track({"subtitles": None}, ["en"]) is None


def test_json3_format_requested_when_not_listed():
    info = video_info(subtitles={"en": [{"ext": "vtt", "url": "https://yt.test/tt?lang=en&fmt=vtt"}]})

    track = select_caption_track(info, ["en"])

    assert track.url == "https://yt.test/tt?lang=en&fmt=json3"


@pytest.mark.asyncio
async def test_fetch_returns_document():
    requested = []

    def handler(request):
        requested.append(str(request.url))
        return httpx.Response(200, json=JSON3)

    info = video_info(automatic={"en": caption_formats("https://yt.test/asr?lang=en")})
    service = make_service(handler, info=info)

    document = await service.fetch(REF)
    await service.aclose()

    assert document.video_id == REF.id
    assert document.title == "Test Video"
    assert document.language == "en"
    assert document.text == "Hello world. How are you?"
    assert requested == ["https://yt.test/asr?lang=en&fmt=json3"]


@pytest.mark.asyncio
async def test_fetch_without_captions_is_unavailable():
    service = make_service(info=video_info())

    with pytest.raises(TranscriptUnavailableError) as exc_info:
        await service.fetch(REF)

    assert "No captions" in exc_info.value.detail


@pytest.mark.asyncio
async def test_fetch_empty_track_is_unavailable():
    service = make_service(
        lambda request: httpx.Response(200, json={"events": []}),
        info=video_info(subtitles={"en": caption_formats("https://yt.test/tt?lang=en")}),
    )

    with pytest.raises(TranscriptUnavailableError):
        await service.fetch(REF)


@pytest.mark.asyncio
async def test_caption_download_error_is_network_error():
    service = make_service(
        lambda request: httpx.Response(429, text="slow down"),
        info=video_info(subtitles={"en": caption_formats("https://yt.test/tt?lang=en")}),
    )

    with pytest.raises(TranscriptNetworkError) as exc_info:
        await service.fetch(REF)

    assert "429" in exc_info.value.detail


@pytest.mark.asyncio
async def test_caption_transport_failure_is_network_error():
    def handler(request):
        raise httpx.ConnectError("Connection reset", request=request)

    service = make_service(
        handler, info=video_info(subtitles={"en": caption_formats("https://yt.test/tt?lang=en")})
    )

    with pytest.raises(TranscriptNetworkError):
        await service.fetch(REF)


@pytest.mark.asyncio
async def test_slow_fetch_times_out():
    service = make_service(timeout=0.05)

    def slow_info(ref):
        time.sleep(0.3)
        return video_info()

    service._extract_info_sync = slow_info

    with pytest.raises(TranscriptNetworkError) as exc_info:
        await service.fetch(REF)

    assert "timed out" in exc_info.value.detail


class FakeYoutubeDL:
    """Stands in for yt_dlp.YoutubeDL inside _extract_info_sync."""

    error = None
    info = None
    options = None

    def __init__(self, options):
        FakeYoutubeDL.options = options

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def extract_info(self, url, download=True, process=True):
        assert download is False
        if self.error:
            raise self.error
        return self.info


@pytest.fixture
def fake_ytdl(monkeypatch):
    FakeYoutubeDL.error = None
    FakeYoutubeDL.info = None
    FakeYoutubeDL.options = None
    monkeypatch.setattr(youtube, "YoutubeDL", FakeYoutubeDL)
    return FakeYoutubeDL


def test_extract_info_returns_raw_info(fake_ytdl):
    fake_ytdl.info = video_info()
    service = YouTubeService(languages=["en"], proxy_url="http://proxy.test:8080")

    assert service._extract_info_sync(REF)["title"] == "Test Video"
    assert fake_ytdl.options["proxy"] == "http://proxy.test:8080"
    assert fake_ytdl.options["skip_download"] is True


def test_expected_extractor_error_is_unavailable(fake_ytdl):
    cause = ExtractorError("Video unavailable", expected=True)
    fake_ytdl.error = DownloadError("ERROR: [youtube] abc12345678: Video unavailable", (ExtractorError, cause, None))
    service = YouTubeService(languages=["en"])

    with pytest.raises(TranscriptUnavailableError) as exc_info:
        service._extract_info_sync(REF)

    assert "Video unavailable" in exc_info.value.detail
    assert "ERROR:" not in exc_info.value.detail


def test_unexpected_download_error_is_network_error(fake_ytdl):
    fake_ytdl.error = DownloadError("ERROR: Unable to download webpage: timed out")
    service = YouTubeService(languages=["en"])

    with pytest.raises(TranscriptNetworkError):
        service._extract_info_sync(REF)


def test_missing_info_is_unavailable(fake_ytdl):
    service = YouTubeService(languages=["en"])

    with pytest.raises(TranscriptUnavailableError):
        service._extract_info_sync(REF)


def test_extract_info_disables_ytdlp_retries(fake_ytdl):
    fake_ytdl.info = video_info()
    service = YouTubeService(languages=["en"])

    service._extract_info_sync(REF)

    assert fake_ytdl.options["retries"] == 0
    assert fake_ytdl.options["extractor_retries"] == 0
