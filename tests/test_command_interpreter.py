"""Unit tests for CommandInterpreter fallback behavior."""

import json
import logging
from datetime import date
from unittest.mock import MagicMock

import pytest

from src.assistant import (
    CommandInterpreter,
    FallbackInterpreter,
    InterpretationResult,
    MalformedResponseError,
    ModelInterpreter,
    OperationType,
    ServiceUnavailableError,
    TaskSnapshot,
)
from src.llm import LLMAdapter, LLMConnectionError

TODAY = date(2026, 10, 14)


@pytest.fixture
def snapshot():
    return [TaskSnapshot(id="t1", title="Buy groceries", position=1)]


class TestCommandInterpreter:
    """Tests for primary/fallback composition."""

    def test_uses_primary_result(self, snapshot):
        primary = MagicMock()
        primary.interpret.return_value = InterpretationResult.ok("from model")
        fallback = MagicMock()

        result = CommandInterpreter(primary, fallback).interpret("anything", snapshot, TODAY)

        assert result.message == "from model"
        primary.interpret.assert_called_once_with("anything", snapshot, TODAY)
        fallback.interpret.assert_not_called()

    def test_primary_semantic_failure_is_not_retried_locally(self, snapshot):
        primary = MagicMock()
        primary.interpret.return_value = InterpretationResult.failure("no such task")
        fallback = MagicMock()

        result = CommandInterpreter(primary, fallback).interpret("delete foo", snapshot, TODAY)

        assert result.success is False
        assert result.message == "no such task"
        fallback.interpret.assert_not_called()

    @pytest.mark.parametrize(
        "error",
        [
            ServiceUnavailableError("down"),
            MalformedResponseError("bad json", raw_response="{"),
            RuntimeError("unexpected"),
        ],
    )
    def test_falls_back_when_primary_raises(self, snapshot, error, caplog):
        primary = MagicMock()
        primary.interpret.side_effect = error

        with caplog.at_level(logging.WARNING):
            result = CommandInterpreter(primary).interpret("Complete groceries", snapshot, TODAY)

        assert result.success is True
        assert result.operations[0].action == OperationType.COMPLETE
        assert result.operations[0].task_ids == ["t1"]
        assert result.error is None
        assert any("fallback" in r.getMessage() for r in caplog.records)

    def test_without_primary_uses_fallback(self, snapshot):
        result = CommandInterpreter().interpret("Delete groceries", snapshot, TODAY)

        assert result.operations[0].action == OperationType.DELETE

    def test_never_raises_when_fallback_fails(self, snapshot):
        primary = MagicMock()
        primary.interpret.side_effect = ServiceUnavailableError("down")
        fallback = MagicMock()
        fallback.interpret.side_effect = ValueError("boom")

        result = CommandInterpreter(primary, fallback).interpret("anything", snapshot, TODAY)

        assert result.success is False
        assert result.operations == []
        assert "try again" in result.message
        assert result.error == "boom"

    def test_defaults_today(self, snapshot):
        fallback = MagicMock()
        fallback.interpret.return_value = InterpretationResult.ok("ok")

        CommandInterpreter(fallback=fallback).interpret("x", snapshot)

        assert fallback.interpret.call_args[0][2] == date.today()

    def test_has_primary(self):
        assert CommandInterpreter().has_primary is False
        assert CommandInterpreter(MagicMock()).has_primary is True


class TestModelToFallbackEndToEnd:
    """Tests wiring a real ModelInterpreter over a failing adapter."""

    def test_connection_error_yields_fallback_result(self, snapshot):
        adapter = MagicMock(spec=LLMAdapter)
        adapter.complete.side_effect = LLMConnectionError("refused")
        interpreter = CommandInterpreter(ModelInterpreter(adapter=adapter))

        result = interpreter.interpret("Plan my week", snapshot, TODAY)
        expected = FallbackInterpreter().interpret("Plan my week", snapshot, TODAY)

        assert result.to_dict() == expected.to_dict()
        assert len(result.operations[0].tasks) == 1

    def test_malformed_json_yields_fallback_result(self, snapshot):
        adapter = MagicMock(spec=LLMAdapter)
        adapter.complete.return_value = "Sure! Here are your tasks."
        interpreter = CommandInterpreter(ModelInterpreter(adapter=adapter))

        result = interpreter.interpret("Delete all completed tasks", snapshot, TODAY)

        assert result.success is False
        assert result.message == "There are no completed tasks to delete."

    def test_model_plan_has_multiple_tasks(self, snapshot):
        adapter = MagicMock(spec=LLMAdapter)
        adapter.complete.return_value = json.dumps(
            {
                "success": True,
                "operations": [
                    {
                        "action": "add",
                        "tasks": [{"title": t} for t in ("Review goals", "Block focus time", "Plan meals", "Book gym")],
                        "message": "Adding 4 tasks",
                    }
                ],
                "message": "Here's a plan for your week",
            }
        )

        result = CommandInterpreter(ModelInterpreter(adapter=adapter)).interpret("Plan my week", snapshot, TODAY)

        assert len(result.operations[0].tasks) == 4
