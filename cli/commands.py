"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from cli.models import (
    CalculateCommand,
    ClockCommand,
    EventsCommand,
    HealthCommand,
    SelectCommand,
)
from cli.config import Config
from cli.calculator_client import CalculatorClient

logger = get_logger(__name__)


_client: Optional[CalculatorClient] = None


def get_client() -> CalculatorClient:
    """
    Get or create the session's CalculatorClient instance.

    The client owns the process's vector clock, so one instance lives for
    the whole REPL session.

    Returns:
        CalculatorClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new CalculatorClient instance")
        config = Config(Path.home() / '.vclock' / 'config.json')
        _client = CalculatorClient(config)
    return _client


def handle_calculate(cmd: CalculateCommand, client: Optional[CalculatorClient] = None) -> str:
    """
    Handle 'calc' command.

    Args:
        cmd: CalculateCommand with n
        client: Optional CalculatorClient for dependency injection (testing)

    Returns:
        Calculation report or error message
    """
    logger.info(f"Executing calc command: n={cmd.n}")
    if client is None:
        client = get_client()
    result = client.calculate(cmd.n)
    logger.debug("Calc command completed")
    return result


def handle_select(cmd: SelectCommand, client: Optional[CalculatorClient] = None) -> str:
    """
    Handle 'select' command.

    Args:
        cmd: SelectCommand with server_ids and n
        client: Optional CalculatorClient for dependency injection (testing)

    Returns:
        Server status plus calculation report, or error message
    """
    logger.info(f"Executing select command: servers={list(cmd.server_ids)} n={cmd.n}")
    if client is None:
        client = get_client()
    return client.calculate_with_selection(list(cmd.server_ids), cmd.n)


def handle_health(cmd: HealthCommand, client: Optional[CalculatorClient] = None) -> str:
    """
    Handle 'health' command.

    Args:
        cmd: HealthCommand
        client: Optional CalculatorClient for dependency injection (testing)

    Returns:
        Health report for every server
    """
    if client is None:
        client = get_client()
    return client.check_health()


def handle_clock(cmd: ClockCommand, client: Optional[CalculatorClient] = None) -> str:
    """Handle 'clock' command."""
    if client is None:
        client = get_client()
    return client.clock_report()


def handle_events(cmd: EventsCommand, client: Optional[CalculatorClient] = None) -> str:
    """Handle 'events' command."""
    if client is None:
        client = get_client()
    return client.event_report()
