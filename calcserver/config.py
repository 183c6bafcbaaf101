"""Configuration settings for a calculator server, read from the environment."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from common.constants import DEFAULT_ROSTER, DEFAULT_SERVER_PORT, MAX_PROCESSING_DELAY_MS
from common.exceptions import ConfigurationError


@dataclass(frozen=True)
class ServerSettings:
    """
    Settings for one calculator server process.

    Attributes:
        server_name: Display name (e.g. "Server 1" or "Server1")
        host: Interface to bind
        port: gRPC port
        roster: Every process id participating in the vector clock
        max_processing_delay_ms: Cap for the simulated processing delay
    """
    server_name: str
    host: str
    port: int
    roster: Tuple[str, ...]
    max_processing_delay_ms: int

    @property
    def process_id(self) -> str:
        """Clock id of this server: the server name without spaces."""
        return self.server_name.replace(" ", "")

    @property
    def listen_address(self) -> str:
        return f"{self.host}:{self.port}"


def _int_setting(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}")


def load_server_settings(env: Optional[Mapping[str, str]] = None) -> ServerSettings:
    """
    Build server settings from environment variables.

    Recognized variables: CALC_SERVER_NAME, CALC_SERVER_HOST, CALC_SERVER_PORT,
    CALC_ROSTER (comma-separated ids), CALC_MAX_PROCESSING_DELAY_MS.

    Args:
        env: Mapping to read from (defaults to os.environ)

    Returns:
        ServerSettings instance

    Raises:
        ConfigurationError: If a value is invalid
    """
    if env is None:
        env = os.environ

    server_name = env.get("CALC_SERVER_NAME", "Server1").strip()
    if not server_name:
        raise ConfigurationError("CALC_SERVER_NAME must not be empty")

    host = env.get("CALC_SERVER_HOST", "[::]")
    port = _int_setting(env, "CALC_SERVER_PORT", DEFAULT_SERVER_PORT)
    if not 0 < port < 65536:
        raise ConfigurationError(f"CALC_SERVER_PORT out of range: {port}")

    raw_roster = env.get("CALC_ROSTER")
    if raw_roster:
        roster = tuple(pid.strip() for pid in raw_roster.split(","))
    else:
        roster = DEFAULT_ROSTER

    delay = _int_setting(env, "CALC_MAX_PROCESSING_DELAY_MS", MAX_PROCESSING_DELAY_MS)
    if delay < 0:
        raise ConfigurationError(f"CALC_MAX_PROCESSING_DELAY_MS must be non-negative, got {delay}")

    return ServerSettings(
        server_name=server_name,
        host=host,
        port=port,
        roster=roster,
        max_processing_delay_ms=delay
    )
