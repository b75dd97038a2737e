from .youtube import YtDlpInfo, VideoReference, TranscriptSegment, TranscriptDocument, CaptionTrack
from .api import SummarizeRequest, SummarizeResponse, ModelsResponse, HealthResponse
from .enums import LLMRole
