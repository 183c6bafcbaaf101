"""Tests for calculator server settings."""

import pytest

from calcserver.config import load_server_settings
from common.constants import DEFAULT_ROSTER, DEFAULT_SERVER_PORT, MAX_PROCESSING_DELAY_MS
from common.exceptions import ConfigurationError


def test_defaults():
    settings = load_server_settings({})

    assert settings.server_name == 'Server1'
    assert settings.port == DEFAULT_SERVER_PORT
    assert settings.roster == DEFAULT_ROSTER
    assert settings.max_processing_delay_ms == MAX_PROCESSING_DELAY_MS
    assert settings.listen_address == f'[::]:{DEFAULT_SERVER_PORT}'


def test_process_id_strips_spaces():
    settings = load_server_settings({'CALC_SERVER_NAME': 'Server 2', 'CALC_SERVER_PORT': '5002'})

    assert settings.process_id == 'Server2'
    assert settings.port == 5002


def test_custom_roster():
    settings = load_server_settings({'CALC_ROSTER': 'Client, Server1 ,Server2'})
    assert settings.roster == ('Client', 'Server1', 'Server2')


@pytest.mark.parametrize('env', [
    {'CALC_SERVER_PORT': 'abc'},
    {'CALC_SERVER_PORT': '70000'},
    {'CALC_SERVER_NAME': '   '},
    {'CALC_MAX_PROCESSING_DELAY_MS': '-1'},
])
def test_invalid_settings(env):
    with pytest.raises(ConfigurationError):
        load_server_settings(env)
