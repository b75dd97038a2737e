"""
Enums for type-safe values across the application.
"""
from enum import Enum


class LLMRole(str, Enum):
    """Role for chat messages sent to the inference backend."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
