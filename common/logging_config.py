import logging
import os
import sys
from typing import Optional

from common.vector_clock import VectorClock


class LogicalClockFilter(logging.Filter):
    """Filter that adds the owning process's vector clock to log records."""

    def __init__(self, clock: VectorClock):
        super().__init__()
        self.clock = clock

    def filter(self, record: logging.LogRecord) -> bool:
        """Attach the current formatted clock as ``record.vector_clock``."""
        record.vector_clock = self.clock.format()
        return True


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
    clock: Optional[VectorClock] = None
) -> logging.Logger:
    """
    Set up logging configuration for a component.

    Args:
        component_name: Name of the component (e.g., 'calcserver', 'cli')
        log_level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL env var or INFO
        clock: Optional vector clock whose current value is included in every record

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = os.getenv('LOG_LEVEL', 'INFO')

    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(component_name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    if clock is not None:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - [%(vector_clock)s] - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.addFilter(LogicalClockFilter(clock))
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    handler.setFormatter(formatter)

    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
