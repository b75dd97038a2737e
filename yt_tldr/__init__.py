"""Self-hosted YouTube video summarizer backed by a local Ollama server."""

__version__ = "0.1.0"
