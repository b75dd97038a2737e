from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

# --- Internal Parsing Models (yt-dlp) ---

class YtDlpInfo(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None

    model_config = ConfigDict(extra='ignore')

# --- Core Data Models ---

class VideoReference(BaseModel):
    id: str = Field(min_length=1)

    model_config = ConfigDict(frozen=True)

    @property
    def watch_url(self) -> str:
        return f"https://www.youtube.com/watch?v={self.id}"

class TranscriptSegment(BaseModel):
    text: str
    start: float
    duration: float

class TranscriptDocument(BaseModel):
    video_id: str
    title: Optional[str] = None
    text: str
    language: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_segments(
        cls,
        video_id: str,
        segments: List[TranscriptSegment],
        title: Optional[str] = None,
        language: Optional[str] = None,
    ) -> "TranscriptDocument":
        """Joins caption segments into one whitespace-normalized text block."""
        text = " ".join(
            " ".join(seg.text.split()) for seg in segments if seg.text and seg.text.strip()
        )
        return cls(video_id=video_id, title=title, text=text, language=language)

class CaptionTrack(BaseModel):
    language: str
    url: str
    is_generated: bool = False

    model_config = ConfigDict(frozen=True)
