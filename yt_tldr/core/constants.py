"""
Application-wide constants and limits.
"""


class DispatcherConfig:
    """Configuration for the summarization worker pool."""
    DISCONNECT_POLL_INTERVAL = 1.0  # Seconds between client liveness checks
    RETRY_AFTER_SECONDS = 5  # Advertised to clients on overload


class OllamaConfig:
    """Ollama REST API paths."""
    CHAT_PATH = "/api/chat"
    TAGS_PATH = "/api/tags"
    ERROR_BODY_LIMIT = 2_000  # Characters of backend error text kept for diagnostics


class YouTubeConfig:
    """Configuration for YouTube URL parsing and transcript retrieval."""
    VIDEO_ID_LENGTH = 11
    HOSTS = (
        "youtube.com",
        "www.youtube.com",
        "m.youtube.com",
        "music.youtube.com",
        "youtube-nocookie.com",
        "www.youtube-nocookie.com",
    )
    SHORT_HOSTS = ("youtu.be", "www.youtu.be")
    PATH_PREFIXES = ("embed", "shorts", "v", "live")
