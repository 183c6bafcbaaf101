"""Tests for CalculatorCompleter."""

import pytest

from prompt_toolkit.document import Document

from cli.completer import CalculatorCompleter
from cli.constants import COMMANDS


@pytest.fixture
def completer():
    """Create a CalculatorCompleter for three servers."""
    return CalculatorCompleter([1, 2, 3])


def get_completions_list(completer, text):
    """Helper to get list of completion texts from completer."""
    doc = Document(text, len(text))
    return [c.text for c in completer.get_completions(doc, None)]


class TestCommandCompletion:
    """Tests for command name completion."""

    def test_empty_input_shows_all_commands(self, completer):
        completions = get_completions_list(completer, "")
        for cmd in COMMANDS:
            assert cmd in completions

    def test_partial_command_filters(self, completer):
        completions = get_completions_list(completer, "c")
        assert set(completions) == {"calc", "clock", "clear"}

    def test_command_completion_case_insensitive(self, completer):
        assert get_completions_list(completer, "HE") == ["health", "help"]


class TestServerIdCompletion:
    """Tests for server id completion in select command."""

    def test_select_offers_all_ids(self, completer):
        assert get_completions_list(completer, "select ") == ["1", "2", "3"]

    def test_select_skips_already_chosen(self, completer):
        assert get_completions_list(completer, "select 1,") == ["2", "3"]

    def test_select_filters_by_prefix(self, completer):
        assert get_completions_list(completer, "select 1,2") == ["2"]

    def test_no_completion_for_n(self, completer):
        assert get_completions_list(completer, "select 1,2 ") == []

    def test_no_completion_for_other_commands(self, completer):
        assert get_completions_list(completer, "calc ") == []
