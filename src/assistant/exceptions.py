"""Exceptions for the assistant module.

Both are raised only by the model-backed interpreter and are absorbed by
``CommandInterpreter``, which falls back to the local rules.
"""

from typing import Optional


class InterpreterError(Exception):
    """Base exception for interpreter failures."""

    pass


class ServiceUnavailableError(InterpreterError):
    """The completion service could not produce a reply.

    Covers connection failures, timeouts, error statuses, rate limits,
    missing credentials and empty completions.
    """

    pass


class MalformedResponseError(InterpreterError):
    """The completion could not be parsed as an interpretation result.

    Attributes:
        raw_response: The completion text that failed to parse.
    """

    def __init__(self, message: str, raw_response: Optional[str] = None):
        super().__init__(message)
        self.raw_response = raw_response
