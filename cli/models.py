"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class CalculateCommand:
    """Sum 1..n across every online server."""

    n: int
    command: Literal["calc"] = "calc"


@dataclass(frozen=True)
class SelectCommand:
    """Sum 1..n across a manually chosen set of servers."""

    server_ids: tuple[int, ...]
    n: int
    command: Literal["select"] = "select"


@dataclass(frozen=True)
class HealthCommand:
    """Check every configured server."""

    command: Literal["health"] = "health"


@dataclass(frozen=True)
class ClockCommand:
    """Show vector clock state and analysis."""

    command: Literal["clock"] = "clock"


@dataclass(frozen=True)
class EventsCommand:
    """Show event log with causality annotations."""

    command: Literal["events"] = "events"


CommandRequest = (
    CalculateCommand
    | SelectCommand
    | HealthCommand
    | ClockCommand
    | EventsCommand
)
