"""REPL with prompt_toolkit for user interaction."""

import os
import sys
from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from common.logging_config import get_logger
from cli.calculator_client import CalculatorClient
from cli.commands import (
    get_client,
    handle_calculate,
    handle_clock,
    handle_events,
    handle_health,
    handle_select,
)
from cli.completer import CalculatorCompleter
from cli.constants import (
    HELP_TEXT,
    LOGO,
    MENU_ALIASES,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.models import (
    CalculateCommand,
    ClockCommand,
    EventsCommand,
    HealthCommand,
    SelectCommand,
)
from cli.parser import ParseError, parse_command

logger = get_logger(__name__)


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_welcome(client: CalculatorClient) -> None:
    """Display logo, client identity and the starting vector clock."""
    print(LOGO)
    print(WELCOME_TITLE)
    print(f"🆔 Client ID: {client.client_id}")
    print(f"🕐 Vector Clock: {client.clock}\n")
    print(WELCOME_HELP)


def dispatch_command(cmd_obj, client: CalculatorClient) -> str:
    """Dispatch parsed command to appropriate handler."""
    if isinstance(cmd_obj, CalculateCommand):
        return handle_calculate(cmd_obj, client)
    elif isinstance(cmd_obj, SelectCommand):
        return handle_select(cmd_obj, client)
    elif isinstance(cmd_obj, HealthCommand):
        return handle_health(cmd_obj, client)
    elif isinstance(cmd_obj, ClockCommand):
        return handle_clock(cmd_obj, client)
    elif isinstance(cmd_obj, EventsCommand):
        return handle_events(cmd_obj, client)
    else:
        return f"Unknown command type: {type(cmd_obj)}"


def repl_loop() -> None:
    """Start interactive REPL with prompt_toolkit."""
    client = get_client()
    completer = CalculatorCompleter([server.id for server in client.servers])
    history = InMemoryHistory()
    session: PromptSession = PromptSession(
        completer=completer, history=history, style=STYLE
    )

    clear_screen()
    show_welcome(client)
    client.start()

    try:
        while True:
            try:
                user_input = session.prompt([("class:prompt", PROMPT_TEXT)])
                command = user_input.strip()

                if not command:
                    continue

                if MENU_ALIASES.get(command, command) == "exit":
                    print("\n👋 Exiting...")
                    break

                if command == "help":
                    print(HELP_TEXT)
                    continue

                if command == "clear":
                    clear_screen()
                    show_welcome(client)
                    continue

                cmd_obj = parse_command(user_input)
                result = dispatch_command(cmd_obj, client)
                print(result)

            except ParseError as e:
                print(f"Error: {e}")
            except KeyboardInterrupt:
                continue
            except EOFError:
                print("\n👋 Exiting...")
                break
    finally:
        client.stop()
        logger.info(f"Session ended with vector clock {client.clock}, {len(client.event_log)} events")
