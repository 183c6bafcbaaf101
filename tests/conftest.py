"""Shared pytest fixtures for all tests."""

import pytest

from cli.config import Config
from common.event_log import EventLog
from common.vector_clock import VectorClock


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .vclock directory
    """
    config_dir = tmp_path / '.vclock'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def roster():
    """Roster used by the two-process scenarios."""
    return ['P1', 'P2']


@pytest.fixture
def p1(roster):
    """Clock owned by P1."""
    return VectorClock('P1', roster)


@pytest.fixture
def p2(roster):
    """Clock owned by P2."""
    return VectorClock('P2', roster)


@pytest.fixture
def server_clock():
    """Clock owned by Server1 with the default calculator roster."""
    return VectorClock('Server1', ['Client', 'Server1', 'Server2', 'Server3'])


@pytest.fixture
def server_log():
    """Event log owned by Server1."""
    return EventLog('Server1')
