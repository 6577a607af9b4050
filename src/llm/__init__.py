"""LLM provider adapters.

Public API:
    - LLMAdapter: Interface for chat-completion providers
    - OpenAIAdapter: OpenAI implementation
    - Message, MessageRole: Conversation message models
    - LLMError and subclasses: Provider-neutral failures
"""

from .adapter import LLMAdapter
from .exceptions import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMError,
    LLMRateLimitError,
    LLMResponseError,
)
from .models import Message, MessageRole
from .openai_adapter import OpenAIAdapter

__all__ = [
    "LLMAdapter",
    "OpenAIAdapter",
    "Message",
    "MessageRole",
    "LLMError",
    "LLMAuthenticationError",
    "LLMConnectionError",
    "LLMRateLimitError",
    "LLMResponseError",
]
