"""Tests for centralized logging configuration."""

import json
import logging
import os
import sys
from unittest.mock import patch

import pytest

from src.logging_config import NOISY_LOGGERS, JSONFormatter, configure_logging


@pytest.fixture(autouse=True)
def _reset_root_logger():
    """Reset root logger state after each test."""
    root = logging.getLogger()
    original_level = root.level
    original_handlers = root.handlers[:]
    yield
    root.setLevel(original_level)
    root.handlers = original_handlers


def _record(msg="msg", args=(), level=logging.INFO, exc_info=None, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="src.assistant.interpreter",
        level=level,
        pathname="interpreter.py",
        lineno=1,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_defaults_to_info_text(self):
        with patch.dict(os.environ, {}, clear=True):
            configure_logging()
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert not isinstance(root.handlers[0].formatter, JSONFormatter)

    @pytest.mark.parametrize(
        "env_level, override, expected",
        [
            ("DEBUG", None, logging.DEBUG),
            ("WARNING", None, logging.WARNING),
            ("WARNING", "DEBUG", logging.DEBUG),
            ("NOTREAL", None, logging.INFO),
        ],
    )
    def test_level_resolution(self, env_level, override, expected):
        with patch.dict(os.environ, {"LOG_LEVEL": env_level}, clear=True):
            configure_logging(level_override=override)
        assert logging.getLogger().level == expected

    def test_json_format(self):
        with patch.dict(os.environ, {"LOG_FORMAT": "json"}, clear=True):
            configure_logging()
        assert isinstance(logging.getLogger().handlers[0].formatter, JSONFormatter)

    def test_clears_existing_handlers(self):
        root = logging.getLogger()
        root.addHandler(logging.StreamHandler())
        root.addHandler(logging.StreamHandler())

        with patch.dict(os.environ, {}, clear=True):
            configure_logging()
        assert len(root.handlers) == 1

    def test_suppresses_noisy_third_party_loggers(self):
        with patch.dict(os.environ, {}, clear=True):
            configure_logging()
        assert "openai" in NOISY_LOGGERS
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_produces_valid_json(self):
        data = json.loads(JSONFormatter().format(_record("Interpreted %r", ("add milk",))))

        assert data["level"] == "INFO"
        assert data["logger"] == "src.assistant.interpreter"
        assert data["message"] == "Interpreted 'add milk'"
        assert "T" in data["timestamp"]
        assert "exception" not in data

    def test_includes_exception_info(self):
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(_record("Step failed", level=logging.ERROR, exc_info=exc_info)))

        assert data["level"] == "ERROR"
        assert "ValueError: test error" in data["exception"]

    def test_includes_extra_fields(self):
        record = _record("Executed", operations=3, command="Delete all completed tasks")

        data = json.loads(JSONFormatter().format(record))

        assert data["operations"] == 3
        assert data["command"] == "Delete all completed tasks"
        assert "pathname" not in data
        assert "args" not in data

    def test_non_serializable_extra_is_stringified(self):
        record = _record("Loaded", path=os.path.join("data", "tasks.json"), when=object())

        data = json.loads(JSONFormatter().format(record))

        assert data["path"].endswith("tasks.json")
        assert data["when"].startswith("<object object")
