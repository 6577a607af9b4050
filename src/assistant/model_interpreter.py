"""Model-backed command interpreter."""

import json
import logging
from datetime import date
from typing import Optional, Sequence

from src.llm import LLMAdapter, LLMError, Message, OpenAIAdapter

from .exceptions import MalformedResponseError, ServiceUnavailableError
from .models import InterpretationResult, TaskSnapshot
from .prompts import build_system_prompt

logger = logging.getLogger(__name__)


class ModelInterpreter:
    """Interprets commands by asking a completion service for structured JSON.

    The system message carries the interpretation policy and the current
    task snapshot; the user message is the raw command. Nothing is retried
    here: a single failure is reported to the caller, which decides whether
    to fall back.

    Example usage:
        interpreter = ModelInterpreter()  # Uses OpenAI by default
        result = interpreter.interpret("Plan my week", snapshot)
    """

    def __init__(
        self,
        adapter: Optional[LLMAdapter] = None,
        temperature: float = 0.3,
        max_tokens: int = 1000,
    ):
        """Initialize the ModelInterpreter.

        Args:
            adapter: LLM adapter to use. Defaults to OpenAIAdapter.
            temperature: Sampling temperature.
            max_tokens: Upper bound on completion length.
        """
        self._adapter = adapter
        self._temperature = temperature
        self._max_tokens = max_tokens

    def _get_adapter(self) -> LLMAdapter:
        """Get LLM adapter, creating default if needed (lazy init)."""
        if self._adapter is None:
            self._adapter = OpenAIAdapter()
        return self._adapter

    def _build_messages(
        self, command: str, tasks: Sequence[TaskSnapshot], today: date
    ) -> list[Message]:
        return [
            Message.system(build_system_prompt(tasks, today)),
            Message.user(command),
        ]

    def _parse_response(self, response: str) -> InterpretationResult:
        """Parse the JSON completion into an InterpretationResult.

        Raises:
            MalformedResponseError: If the text is not JSON or does not
                follow the result schema.
        """
        try:
            data = json.loads(response)
        except json.JSONDecodeError as e:
            raise MalformedResponseError(
                f"Failed to parse model response as JSON: {e}",
                raw_response=response,
            ) from e

        try:
            return InterpretationResult.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(
                f"Model response does not match the result schema: {e}",
                raw_response=response,
            ) from e

    def interpret(
        self,
        command: str,
        tasks: Sequence[TaskSnapshot],
        today: Optional[date] = None,
    ) -> InterpretationResult:
        """Interpret a command with the completion service.

        Args:
            command: Raw user text.
            tasks: Current snapshot, rendered into the instructions.
            today: Date the service resolves relative dates against.

        Returns:
            The parsed result.

        Raises:
            ServiceUnavailableError: No usable reply (network, auth, rate
                limit, error status, empty completion).
            MalformedResponseError: Reply is not a valid result.
        """
        today = today or date.today()
        messages = self._build_messages(command, tasks, today)

        try:
            adapter = self._get_adapter()
            response = adapter.complete(
                messages=messages,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                json_mode=True,
            )
        except LLMError as e:
            raise ServiceUnavailableError(f"Completion service unavailable: {e}") from e

        result = self._parse_response(response)
        logger.debug(
            "Model interpreted %r into %d operation(s)", command, len(result.operations)
        )
        return result

    @property
    def adapter(self) -> LLMAdapter:
        """Access the LLM adapter."""
        return self._get_adapter()
