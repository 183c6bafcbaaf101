"""Configuration management for the calculator CLI."""

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import List

from common.constants import (
    CALCULATE_TIMEOUT_SECONDS,
    CLIENT_PROCESS_ID,
    DEFAULT_SERVER_HOST,
    DEFAULT_SERVER_NAMES,
    DEFAULT_SERVER_PORT,
    HEALTH_REPORT_TIMEOUT_SECONDS,
    PROBE_TIMEOUT_SECONDS,
)
from common.exceptions import ConfigurationError
from common.types import ServerInfo

logger = logging.getLogger(__name__)


class Config:
    """Manages CLI configuration stored in JSON file."""

    DEFAULT_CONFIG = {
        "process_id": CLIENT_PROCESS_ID,
        "servers": [],
        "request_timeout": CALCULATE_TIMEOUT_SECONDS,
        "probe_timeout": PROBE_TIMEOUT_SECONDS,
        "health_timeout": HEALTH_REPORT_TIMEOUT_SECONDS,
        "timeline_window": 10,
        "recent_events": 3,
    }

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.vclock/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / '.vclock' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                config = self._defaults()
                config.update(data)
                return config
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Unreadable config {self.config_path}: {e}; using defaults")
                backup_path = self.config_path.with_suffix('.json.bak')
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError as copy_error:
                    logger.warning(f"Could not back up config: {copy_error}")
                return self._defaults()
        else:
            config = self._defaults()
            try:
                with open(self.config_path, 'w') as f:
                    json.dump(config, f, indent=2)
            except IOError as e:
                logger.warning(f"Could not write default config: {e}")
            return config

    def _defaults(self) -> dict:
        """
        Build a fresh copy of the default configuration.

        Default server addresses use CALC_SERVER_HOST (default "localhost")
        with consecutive ports starting at 5001.
        """
        config = json.loads(json.dumps(self.DEFAULT_CONFIG))
        host = os.environ.get('CALC_SERVER_HOST', DEFAULT_SERVER_HOST)
        config["servers"] = [
            {"id": index + 1, "name": name, "address": f"{host}:{DEFAULT_SERVER_PORT + index}"}
            for index, name in enumerate(DEFAULT_SERVER_NAMES)
        ]
        return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except IOError as e:
            logger.warning(f"Could not save config: {e}")

    def get_process_id(self) -> str:
        """
        Get the client's process id in the vector clock.

        Returns:
            Process id string (default "Client")
        """
        return self.data.get('process_id', CLIENT_PROCESS_ID)

    def get_servers(self) -> List[ServerInfo]:
        """
        Get configured calculator servers.

        Returns:
            List of ServerInfo ordered by id

        Raises:
            ConfigurationError: If a server entry is malformed or ids repeat
        """
        servers = []
        seen_ids = set()
        for entry in self.data.get('servers', []):
            try:
                server = ServerInfo(id=int(entry['id']), name=str(entry['name']), address=str(entry['address']))
            except (KeyError, TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid server entry {entry!r}: {e}")
            if server.id in seen_ids:
                raise ConfigurationError(f"Duplicate server id: {server.id}")
            seen_ids.add(server.id)
            servers.append(server)
        return sorted(servers, key=lambda s: s.id)

    def get_roster(self) -> List[str]:
        """
        Get every process id the client's clock tracks.

        Uses the explicit "roster" entry when present, otherwise the client's
        process id followed by the configured server names.

        Returns:
            List of process ids
        """
        if self.data.get('roster'):
            return list(self.data['roster'])
        return [self.get_process_id()] + [s.name.replace(" ", "") for s in self.get_servers()]

    def get_request_timeout(self) -> float:
        """Deadline in seconds for a partial sum request."""
        return float(self.data.get('request_timeout', CALCULATE_TIMEOUT_SECONDS))

    def get_probe_timeout(self) -> float:
        """Deadline in seconds for the availability probe before a calculation."""
        return float(self.data.get('probe_timeout', PROBE_TIMEOUT_SECONDS))

    def get_health_timeout(self) -> float:
        """Deadline in seconds for the health report."""
        return float(self.data.get('health_timeout', HEALTH_REPORT_TIMEOUT_SECONDS))

    def get_timeline_window(self) -> int:
        return int(self.data.get('timeline_window', 10))

    def get_recent_events(self) -> int:
        return int(self.data.get('recent_events', 3))
