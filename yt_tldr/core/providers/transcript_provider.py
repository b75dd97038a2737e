"""
Abstract base class for transcript sources.
"""
from abc import ABC, abstractmethod

from yt_tldr.models import TranscriptDocument, VideoReference


class TranscriptProvider(ABC):
    """Retrieves the spoken-text transcript and title of a video."""

    @abstractmethod
    async def fetch(self, ref: VideoReference) -> TranscriptDocument:
        """
        Fetch the transcript for a single video.

        Args:
            ref: The resolved video reference.

        Returns:
            TranscriptDocument with non-empty text.

        Raises:
            TranscriptUnavailableError: Captions are disabled or the video is missing.
            TranscriptNetworkError: Transport failure or timeout.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources held by the provider."""
        return None
