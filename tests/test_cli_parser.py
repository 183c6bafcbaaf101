"""Tests for the CLI command parser."""

import pytest

from cli.models import (
    CalculateCommand,
    ClockCommand,
    EventsCommand,
    HealthCommand,
    SelectCommand,
)
from cli.parser import ParseError, parse_command, parse_server_ids


class TestCalc:

    def test_calc(self):
        assert parse_command("calc 100") == CalculateCommand(n=100)

    def test_calc_uppercase(self):
        assert parse_command("CALC 5") == CalculateCommand(n=5)

    def test_menu_alias(self):
        assert parse_command("1 42") == CalculateCommand(n=42)

    @pytest.mark.parametrize('line', ["calc 0", "calc -3", "calc abc", "calc 1.5"])
    def test_invalid_number(self, line):
        with pytest.raises(ParseError, match="positive integer"):
            parse_command(line)

    def test_missing_argument(self):
        with pytest.raises(ParseError, match="exactly 1 argument"):
            parse_command("calc")


class TestSelect:

    def test_select(self):
        assert parse_command("select 1,3 100") == SelectCommand(server_ids=(1, 3), n=100)

    def test_select_with_spaces(self):
        assert parse_command("select 1, 3 100") == SelectCommand(server_ids=(1, 3), n=100)

    def test_select_alias(self):
        assert parse_command("2 2 10") == SelectCommand(server_ids=(2,), n=10)

    def test_select_missing_n(self):
        with pytest.raises(ParseError):
            parse_command("select 1,2")

    def test_duplicate_ids_dropped(self):
        assert parse_server_ids("3,1,3") == (3, 1)

    def test_invalid_selection(self):
        with pytest.raises(ParseError, match="Invalid selection format"):
            parse_server_ids("1,a")

    def test_empty_selection(self):
        with pytest.raises(ParseError, match="No servers selected"):
            parse_server_ids(",,")


class TestNoArgCommands:

    @pytest.mark.parametrize('line, expected', [
        ("health", HealthCommand()),
        ("3", HealthCommand()),
        ("clock", ClockCommand()),
        ("4", ClockCommand()),
        ("events", EventsCommand()),
        ("5", EventsCommand()),
    ])
    def test_parses(self, line, expected):
        assert parse_command(line) == expected

    def test_rejects_arguments(self):
        with pytest.raises(ParseError, match="takes no arguments"):
            parse_command("clock now")


def test_unknown_command():
    with pytest.raises(ParseError, match="Unknown command"):
        parse_command("frobnicate")


def test_empty_command():
    with pytest.raises(ParseError):
        parse_command("   ")


def test_unbalanced_quotes():
    with pytest.raises(ParseError, match="Invalid syntax"):
        parse_command('calc "10')
