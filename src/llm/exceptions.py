"""Exceptions raised by LLM adapters."""

from typing import Optional


class LLMError(Exception):
    """Base exception for LLM provider errors."""

    pass


class LLMConnectionError(LLMError):
    """Failed to reach the LLM provider (network error or timeout)."""

    pass


class LLMRateLimitError(LLMError):
    """Rate limit exceeded on LLM provider.

    Attributes:
        retry_after: Seconds to wait before retrying, if provided by the API.
    """

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


class LLMResponseError(LLMError):
    """LLM returned an error status or an empty completion.

    Attributes:
        raw_response: The original response text, when there was one.
    """

    def __init__(self, message: str, raw_response: Optional[str] = None):
        super().__init__(message)
        self.raw_response = raw_response


class LLMAuthenticationError(LLMError):
    """Authentication failed with LLM provider, or no credentials configured."""

    pass
