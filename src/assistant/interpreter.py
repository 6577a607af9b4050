"""Command interpretation entry point: model first, local rules second."""

import logging
from datetime import date
from typing import Optional, Protocol, Sequence

from .exceptions import InterpreterError
from .fallback import FallbackInterpreter
from .models import InterpretationResult, TaskSnapshot

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Something went wrong while processing your command. Please try again."


class Interpreter(Protocol):
    """Anything that maps a command and a snapshot to an InterpretationResult."""

    def interpret(
        self,
        command: str,
        tasks: Sequence[TaskSnapshot],
        today: Optional[date] = None,
    ) -> InterpretationResult:
        ...


class CommandInterpreter:
    """Tries a primary interpreter and degrades to a fallback on failure.

    ``interpret`` never raises. When the primary is missing or raises, the
    fallback handles the command. If the fallback raises too, a generic
    failure result is returned with the exception text in ``error``.

    Example usage:
        interpreter = CommandInterpreter(ModelInterpreter())
        result = interpreter.interpret("Delete all completed tasks", snapshot)
    """

    def __init__(
        self,
        primary: Optional[Interpreter] = None,
        fallback: Optional[Interpreter] = None,
    ):
        """Initialize the CommandInterpreter.

        Args:
            primary: Preferred interpreter, usually ModelInterpreter.
                None means the fallback handles every command.
            fallback: Interpreter used when the primary is unavailable.
                Defaults to FallbackInterpreter.
        """
        self._primary = primary
        self._fallback = fallback or FallbackInterpreter()

    @property
    def has_primary(self) -> bool:
        return self._primary is not None

    def interpret(
        self,
        command: str,
        tasks: Sequence[TaskSnapshot],
        today: Optional[date] = None,
    ) -> InterpretationResult:
        """Interpret a command against the current snapshot.

        Args:
            command: Raw user text.
            tasks: Current snapshot.
            today: Reference date. Defaults to the current date.

        Returns:
            InterpretationResult from the first interpreter that answers.
        """
        today = today or date.today()

        if self._primary is not None:
            try:
                return self._primary.interpret(command, tasks, today)
            except InterpreterError as e:
                logger.warning("Model interpretation failed, using fallback: %s", e)
            except Exception as e:
                logger.warning(
                    "Unexpected error from primary interpreter, using fallback: %s", e
                )

        try:
            return self._fallback.interpret(command, tasks, today)
        except Exception as e:
            logger.exception("Fallback interpretation failed for %r", command)
            return InterpretationResult.failure(GENERIC_FAILURE_MESSAGE, error=str(e))
