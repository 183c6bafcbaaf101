"""Shared data type definitions (ServerInfo, EventRecord)."""

from dataclasses import dataclass
from datetime import datetime

from common.vector_clock import ClockSnapshot


@dataclass(frozen=True)
class ServerInfo:
    """
    A calculator server the client can talk to.
    """
    id: int
    name: str
    address: str


@dataclass(frozen=True)
class EventRecord:
    """
    An event stamped by a process.

    The clock is the snapshot at stamping time; the wall-clock timestamp is
    informational only and never used for ordering.
    """
    event_id: str
    process_id: str
    event_type: str
    clock: ClockSnapshot
    timestamp: datetime
    description: str
