"""Command parser for CLI input."""

import shlex

from cli.constants import MENU_ALIASES
from cli.models import (
    CalculateCommand,
    ClockCommand,
    CommandRequest,
    EventsCommand,
    HealthCommand,
    SelectCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of Calculate/Select/Health/Clock/Events)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = MENU_ALIASES.get(tokens[0], tokens[0].lower())

    if command_name == "calc":
        return _parse_calc(tokens[1:])
    elif command_name == "select":
        return _parse_select(tokens[1:])
    elif command_name == "health":
        return _parse_no_args(command_name, tokens[1:], HealthCommand)
    elif command_name == "clock":
        return _parse_no_args(command_name, tokens[1:], ClockCommand)
    elif command_name == "events":
        return _parse_no_args(command_name, tokens[1:], EventsCommand)
    else:
        raise ParseError(f"Unknown command: {tokens[0]}")


def parse_positive_int(raw: str) -> int:
    """Parse n for a calculation; must be a positive integer."""
    try:
        n = int(raw)
    except ValueError:
        raise ParseError(f"Invalid number '{raw}'. Please enter a positive integer.")
    if n < 1:
        raise ParseError(f"Invalid number '{raw}'. Please enter a positive integer.")
    return n


def parse_server_ids(raw: str) -> tuple[int, ...]:
    """
    Parse a comma-separated server selection such as '1,3'.

    Duplicates are dropped, first occurrence order is kept.
    """
    ids = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            server_id = int(part)
        except ValueError:
            raise ParseError(f"Invalid selection format: '{raw}'")
        if server_id not in ids:
            ids.append(server_id)
    if not ids:
        raise ParseError("No servers selected.")
    return tuple(ids)


def _parse_calc(args: list[str]) -> CalculateCommand:
    """Parse 'calc <n>' command."""
    if len(args) != 1:
        raise ParseError("calc requires exactly 1 argument: <n>")
    return CalculateCommand(n=parse_positive_int(args[0]))


def _parse_select(args: list[str]) -> SelectCommand:
    """Parse 'select <ids> <n>' command."""
    if len(args) < 2:
        raise ParseError("select requires server ids and <n>, e.g. 'select 1,3 100'")

    # Allow '1, 3 100' as well as '1,3 100'
    server_ids = parse_server_ids(",".join(args[:-1]))
    return SelectCommand(server_ids=server_ids, n=parse_positive_int(args[-1]))


def _parse_no_args(name: str, args: list[str], command_type):
    if args:
        raise ParseError(f"{name} takes no arguments")
    return command_type()
