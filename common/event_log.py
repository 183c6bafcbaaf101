"""
Append-only event log used to reconstruct a process's causal history.

Only the owning process appends to its log. The log keeps every record by
default; with a capacity it keeps the most recent ``capacity`` records.
"""

import logging
import threading
import uuid
from collections import Counter, deque
from datetime import datetime
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from common.causality import Relation, relation
from common.types import EventRecord
from common.vector_clock import ClockSnapshot

logger = logging.getLogger(__name__)


class EventLog:
    """
    Ordered record of the events stamped by one process.

    Thread-safe: concurrent request handlers of a server may append at the
    same time; appends are serialized and keep issuance order.
    """

    def __init__(self, process_id: str, capacity: Optional[int] = None):
        """
        Initialize an empty log.

        Args:
            process_id: Id of the process that owns the log
            capacity: Optional maximum number of retained records
        """
        if capacity is not None and capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.process_id = process_id
        self._records = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def append(
        self,
        event_type: str,
        description: str,
        snapshot: Mapping
    ) -> EventRecord:
        """
        Record a new event at the end of the log.

        Args:
            event_type: Caller-defined tag (e.g. "REQUEST_RECEIVED")
            description: Free-text description
            snapshot: Clock snapshot at the moment of stamping

        Returns:
            The stored EventRecord
        """
        clock = snapshot if isinstance(snapshot, ClockSnapshot) else ClockSnapshot(snapshot)
        record = EventRecord(
            event_id=uuid.uuid4().hex[:8],
            process_id=self.process_id,
            event_type=event_type,
            clock=clock,
            timestamp=datetime.now(),
            description=description
        )
        with self._lock:
            self._records.append(record)
        logger.debug(f"Event {record.event_id} [{event_type}] {clock.format()} {description}")
        return record

    def tail(self, n: int) -> List[EventRecord]:
        """
        Get the last ``n`` records in insertion order.

        Args:
            n: Number of records wanted

        Returns:
            Up to ``n`` most recent records, oldest first
        """
        if n <= 0:
            return []
        with self._lock:
            records = list(self._records)
        return records[-n:]

    def summarize_by_type(self) -> Dict[str, int]:
        """Count records per event type."""
        with self._lock:
            return dict(Counter(record.event_type for record in self._records))

    def records(self) -> List[EventRecord]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[EventRecord]:
        return iter(self.records())


def pairwise_causality(
    window: Sequence[EventRecord]
) -> List[Tuple[EventRecord, Optional[Relation]]]:
    """
    Annotate each record with its relation to the record just before it.

    Args:
        window: Consecutive records, oldest first (e.g. from EventLog.tail)

    Returns:
        List of (record, relation of previous record to this one); the first
        entry has no predecessor and carries None
    """
    annotated = []
    previous = None
    for record in window:
        annotated.append((record, relation(previous.clock, record.clock) if previous else None))
        previous = record
    return annotated
