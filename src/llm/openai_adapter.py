"""OpenAI chat-completion adapter."""

import logging
import os
import time
from typing import Any, Optional

from openai import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    AuthenticationError,
    OpenAI,
    RateLimitError,
)

from .adapter import LLMAdapter
from .exceptions import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMError,
    LLMRateLimitError,
    LLMResponseError,
)
from .models import Message

logger = logging.getLogger(__name__)

JSON_FORMAT = {"type": "json_object"}
TEXT_FORMAT = {"type": "text"}


def _retry_after(error: RateLimitError) -> Optional[float]:
    response = getattr(error, "response", None)
    if response is None:
        return None
    header = response.headers.get("retry-after")
    if not header:
        return None
    try:
        return float(header)
    except ValueError:
        return None


def translate_error(error: APIError) -> LLMError:
    """Map an openai SDK exception onto the provider-neutral hierarchy.

    Timeouts are checked before connection errors since the SDK's timeout
    class is a subclass of its connection error.
    """
    if isinstance(error, AuthenticationError):
        return LLMAuthenticationError(f"OpenAI authentication failed: {error}")
    if isinstance(error, RateLimitError):
        return LLMRateLimitError(f"OpenAI rate limit exceeded: {error}", _retry_after(error))
    if isinstance(error, APITimeoutError):
        return LLMConnectionError(f"OpenAI request timed out: {error}")
    if isinstance(error, APIConnectionError):
        return LLMConnectionError(f"Failed to connect to OpenAI: {error}")
    return LLMResponseError(f"OpenAI API error: {error}")


def _extract_content(response: Any) -> str:
    if not response.choices:
        raise LLMResponseError("No choices in OpenAI response")
    content = response.choices[0].message.content
    if not content:
        raise LLMResponseError("Empty content in OpenAI response")
    return content


class OpenAIAdapter(LLMAdapter):
    """LLM adapter for OpenAI chat models.

    The client is created lazily on the first completion. SDK retries are
    off unless ``max_retries`` is given, so a failed request surfaces after
    a single attempt.

    Example usage:
        adapter = OpenAIAdapter()  # Uses OPENAI_API_KEY env var
        adapter = OpenAIAdapter(api_key="sk-...", model="gpt-4o")
    """

    DEFAULT_MODEL = "gpt-4o-mini"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        organization: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 0,
    ):
        """Initialize the adapter.

        Args:
            api_key: OpenAI API key. Defaults to OPENAI_API_KEY env var.
            model: Chat model name. Defaults to gpt-4o-mini.
            organization: Optional OpenAI organization ID.
            timeout: Request timeout in seconds.
            max_retries: Retries performed by the SDK itself.

        Raises:
            LLMAuthenticationError: If no API key is available.
        """
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self._api_key:
            raise LLMAuthenticationError(
                "OpenAI API key not provided. Set OPENAI_API_KEY environment variable "
                "or pass api_key parameter."
            )
        self._model = model or self.DEFAULT_MODEL
        self._organization = organization
        self._timeout = timeout
        self._max_retries = max_retries
        self._client: Optional[OpenAI] = None

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                api_key=self._api_key,
                organization=self._organization,
                timeout=self._timeout,
                max_retries=self._max_retries,
            )
        return self._client

    def complete(
        self,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int = 1024,
        json_mode: bool = False,
    ) -> str:
        """Run one chat completion and return its text.

        Raises:
            LLMConnectionError: Connection failure or timeout.
            LLMRateLimitError: Rate limit exceeded.
            LLMAuthenticationError: Invalid API key.
            LLMResponseError: Error status, or no usable content.
        """
        client = self._get_client()
        start = time.monotonic()
        try:
            response = client.chat.completions.create(
                model=self._model,
                messages=[m.to_dict() for m in messages],  # type: ignore[arg-type]
                temperature=temperature,
                max_tokens=max_tokens,
                response_format=JSON_FORMAT if json_mode else TEXT_FORMAT,  # type: ignore[arg-type]
            )
        except APIError as e:
            raise translate_error(e) from e

        content = _extract_content(response)
        usage = response.usage
        logger.debug(
            "OpenAI completion model=%s json_mode=%s in %.2fs",
            self._model,
            json_mode,
            time.monotonic() - start,
            extra={
                "prompt_tokens": usage.prompt_tokens if usage else None,
                "completion_tokens": usage.completion_tokens if usage else None,
            },
        )
        return content

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def provider_name(self) -> str:
        return "OpenAI"
