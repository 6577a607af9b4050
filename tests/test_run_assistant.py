"""Tests for the command-line entry point."""

import json
import logging
import os
from unittest.mock import patch

import pytest

import run_assistant


@pytest.fixture(autouse=True)
def _isolated_env():
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    with patch.dict(os.environ, {}, clear=True), patch.object(run_assistant, "load_dotenv"):
        yield
    root.handlers = original_handlers
    root.setLevel(original_level)


def _run(tmp_path, *args):
    return run_assistant.main(["--no-model", "--tasks-file", str(tmp_path / "tasks.json"), *args])


def test_add_then_list(tmp_path, capsys):
    assert _run(tmp_path, "--today", "2026-10-14", "Add task: Pay rent due tomorrow") == 0
    assert "Pay rent" in capsys.readouterr().out

    assert _run(tmp_path, "--list") == 0
    out = capsys.readouterr().out
    assert "[ ] Pay rent [medium] (due 2026-10-15)" in out


def test_list_shows_dashboard_suggestions(tmp_path, capsys):
    _run(tmp_path, "Add task: Pay rent")
    capsys.readouterr()

    assert _run(tmp_path, "--list") == 0
    out = capsys.readouterr().out
    assert "Try:" in out
    assert "- Complete all tasks" in out


def test_list_json_includes_suggestions(tmp_path, capsys):
    assert _run(tmp_path, "--list", "--json") == 0

    data = json.loads(capsys.readouterr().out)
    assert data["tasks"] == []
    assert "Add task: Plan my week" in data["suggestions"]


def test_json_output(tmp_path, capsys):
    assert _run(tmp_path, "--json", "Add task: Pay rent") == 0

    data = json.loads(capsys.readouterr().out)
    assert data["success"] is True
    assert data["operations"][0]["action"] == "add"
    assert data["execution"]["created"][0]["title"] == "Pay rent"


def test_failed_command_exit_code(tmp_path, capsys):
    assert _run(tmp_path, "Complete taxes") == 1
    assert "taxes" in capsys.readouterr().out


def test_suggest_on_empty_store(tmp_path, capsys):
    assert _run(tmp_path, "--suggest", "--json") == 0
    assert json.loads(capsys.readouterr().out)["suggestions"]


def test_requires_a_command(tmp_path):
    with pytest.raises(SystemExit):
        _run(tmp_path)


def test_rejects_bad_date(tmp_path):
    with pytest.raises(SystemExit):
        _run(tmp_path, "--today", "tomorrow", "add milk")
