"""Abstract interface for LLM adapters."""

from abc import ABC, abstractmethod

from .models import Message


class LLMAdapter(ABC):
    """Abstract base class for chat-completion providers.

    The task assistant only needs a single blocking completion call. An
    implementation must translate every provider failure into one of the
    exceptions in ``src.llm.exceptions`` so callers can route on them
    without knowing the provider SDK.

    Example usage:
        adapter = OpenAIAdapter(api_key="...")
        messages = [
            Message.system("You turn commands into task operations."),
            Message.user("add task: buy milk"),
        ]
        response = adapter.complete(messages, json_mode=True)
    """

    @abstractmethod
    def complete(
        self,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int = 1024,
        json_mode: bool = False,
    ) -> str:
        """Send messages to the LLM and return the completion text.

        Args:
            messages: Conversation messages, system prompt first.
            temperature: Sampling temperature (0.0 = deterministic).
            max_tokens: Maximum tokens in response.
            json_mode: If True, request a JSON object as output.

        Returns:
            The completion text (never empty).

        Raises:
            LLMConnectionError: Failed to connect to provider.
            LLMRateLimitError: Rate limit exceeded.
            LLMAuthenticationError: Invalid credentials.
            LLMResponseError: Error status or empty completion.
        """
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return the name of the model being used."""
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of the LLM provider."""
        pass
