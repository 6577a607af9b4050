"""Unit tests for task reference matching and priority cues."""

import pytest

from src.assistant import TaskSnapshot
from src.assistant.matching import clean_search_term, describe_matches, find_tasks
from src.assistant.vocabulary import detect_priority, parse_priority_word
from src.tasks import Priority


@pytest.fixture
def tasks():
    return [
        TaskSnapshot(id="a", title="Report"),
        TaskSnapshot(id="b", title="Report draft"),
        TaskSnapshot(id="c", title="Gym", description="leg day at the gym"),
    ]


class TestCleanSearchTerm:
    @pytest.mark.parametrize(
        "term, expected",
        [
            ('"the report"', "report"),
            ("my groceries task", "groceries"),
            ("  Write Report ", "Write Report"),
            ("the", "the"),
        ],
    )
    def test_clean(self, term, expected):
        assert clean_search_term(term) == expected


class TestFindTasks:
    def test_exact_title_wins(self, tasks):
        assert [t.id for t in find_tasks(tasks, "REPORT")] == ["a"]

    def test_fuzzy_matches_title_and_description(self, tasks):
        assert [t.id for t in find_tasks(tasks, "draft")] == ["b"]
        assert [t.id for t in find_tasks(tasks, "leg day")] == ["c"]

    def test_fuzzy_keeps_ties(self, tasks):
        assert [t.id for t in find_tasks(tasks, "repo")] == ["a", "b"]

    def test_no_match(self, tasks):
        assert find_tasks(tasks, "taxes") == []

    def test_describe_matches(self, tasks):
        assert describe_matches(tasks[:1]) == '"Report"'
        assert describe_matches(tasks) == "3 tasks"


class TestPriorityCues:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Fix the server ASAP", Priority.HIGH),
            ("urgent: call bank", Priority.HIGH),
            ("Read that book someday", Priority.LOW),
            ("important but maybe later", Priority.HIGH),
            ("Water plants", Priority.MEDIUM),
            ("Reply urgently", Priority.HIGH),
        ],
    )
    def test_detect_priority(self, text, expected):
        assert detect_priority(text) == expected

    def test_parse_priority_word(self):
        assert parse_priority_word(" Critical ") == Priority.HIGH
        assert parse_priority_word("minor") == Priority.LOW
        assert parse_priority_word("whatever") == Priority.MEDIUM
