"""
Vector clock implementation for causality tracking between calculator processes.

Each process (the client and every server) owns exactly one VectorClock for
its whole lifetime. The clock tracks a fixed roster of process ids; local
events tick the owner's counter and received messages are merged with the
component-wise maximum before ticking.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, Optional, Tuple

from common.exceptions import ConfigurationError, InvalidSnapshotError


def format_clock(clock: Mapping) -> str:
    """
    Render a clock mapping as ``{A:1, B:0}`` with keys in lexicographic order.

    Args:
        clock: Mapping of process id to counter

    Returns:
        Deterministic string representation
    """
    items = ", ".join(f"{pid}:{value}" for pid, value in sorted(clock.items()))
    return "{" + items + "}"


class ClockSnapshot(Mapping):
    """
    Immutable copy of a clock state at a point in time.

    Behaves as a read-only ``Mapping[str, int]`` so it can be compared with
    plain dictionaries received over the wire.
    """

    __slots__ = ("_counters",)

    def __init__(self, counters: Optional[Mapping] = None):
        self._counters: Dict[str, int] = dict(counters or {})

    @classmethod
    def from_wire(cls, data) -> ClockSnapshot:
        """
        Build a snapshot from an untrusted process-id -> counter mapping.

        Args:
            data: Decoded JSON object from a request or reply

        Returns:
            ClockSnapshot instance

        Raises:
            InvalidSnapshotError: If the payload is not a flat mapping of
                string ids to non-negative integers
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise InvalidSnapshotError(f"Vector clock must be an object, got {type(data).__name__}")

        counters = {}
        for pid, value in data.items():
            if not isinstance(pid, str) or not pid:
                raise InvalidSnapshotError(f"Invalid process id in vector clock: {pid!r}")
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidSnapshotError(f"Counter for {pid} must be an integer, got {value!r}")
            if value < 0:
                raise InvalidSnapshotError(f"Counter for {pid} must be non-negative, got {value}")
            counters[pid] = value
        return cls(counters)

    def __getitem__(self, pid: str) -> int:
        return self._counters[pid]

    def __iter__(self) -> Iterator[str]:
        return iter(self._counters)

    def __len__(self) -> int:
        return len(self._counters)

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._counters.items())))

    def to_dict(self) -> Dict[str, int]:
        """Return a mutable copy suitable for serialization."""
        return dict(self._counters)

    def format(self) -> str:
        return format_clock(self._counters)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"ClockSnapshot({self.format()})"


class VectorClock:
    """
    Vector clock owned by a single process.

    The roster of tracked processes is fixed at construction and never grows.
    Every operation runs inside one lock so that compound read-modify-write
    sequences (merge) are atomic with respect to each other and to snapshots.
    Separate instances share nothing and never block one another.
    """

    def __init__(
        self,
        process_id: str,
        roster: Iterable[str],
        initial: Optional[Mapping] = None
    ):
        """
        Initialize a clock with every roster counter at zero.

        Args:
            process_id: Id of the owning process (must be in the roster)
            roster: Complete list of participating process ids
            initial: Optional starting counters for a subset of the roster

        Raises:
            ConfigurationError: If the roster or initial counters are malformed
        """
        roster = list(roster)
        if not roster:
            raise ConfigurationError("Roster must contain at least one process id")

        seen = set()
        for pid in roster:
            if not isinstance(pid, str) or not pid.strip():
                raise ConfigurationError(f"Invalid process id in roster: {pid!r}")
            if pid in seen:
                raise ConfigurationError(f"Duplicate process id in roster: {pid}")
            seen.add(pid)

        if process_id not in seen:
            raise ConfigurationError(
                f"Owning process {process_id!r} is not part of the roster {sorted(seen)}"
            )

        self._process_id = process_id
        self._clock: Dict[str, int] = {pid: 0 for pid in roster}
        self._lock = threading.Lock()

        for pid, value in (initial or {}).items():
            if pid not in self._clock:
                raise ConfigurationError(f"Initial counter for unknown process: {pid}")
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigurationError(f"Initial counter for {pid} must be a non-negative integer, got {value!r}")
            self._clock[pid] = value

    @property
    def process_id(self) -> str:
        return self._process_id

    def increment(self) -> ClockSnapshot:
        """
        Tick the owner's counter for a local event.

        Returns:
            Snapshot taken right after the tick
        """
        with self._lock:
            self._clock[self._process_id] += 1
            return ClockSnapshot(self._clock)

    def merge(self, received: Mapping) -> ClockSnapshot:
        """
        Apply the receive rule: component-wise max on shared keys, then tick.

        Keys only present in ``received`` are dropped. Each call ticks the
        owner's counter exactly once, even for a snapshot merged before.

        Args:
            received: Snapshot carried by the incoming message

        Returns:
            Snapshot taken right after the merge
        """
        return self.exchange(received)[1]

    def exchange(self, received: Mapping) -> Tuple[ClockSnapshot, ClockSnapshot]:
        """
        Merge ``received`` and return the states on either side of the merge.

        Both snapshots are taken inside the same critical section, so no
        concurrent tick can slip between them.

        Args:
            received: Snapshot carried by the incoming message

        Returns:
            Tuple of (snapshot before merge, snapshot after merge)

        Raises:
            InvalidSnapshotError: If ``received`` is malformed; the clock is
                left unchanged
        """
        if not isinstance(received, ClockSnapshot):
            received = ClockSnapshot.from_wire(received)

        with self._lock:
            before = ClockSnapshot(self._clock)
            merged = dict(self._clock)
            for pid, value in received.items():
                if pid in merged:
                    merged[pid] = max(merged[pid], value)
            merged[self._process_id] += 1
            self._clock = merged
            return before, ClockSnapshot(merged)

    def snapshot(self) -> ClockSnapshot:
        """Return an immutable copy of the current state."""
        with self._lock:
            return ClockSnapshot(self._clock)

    def value_of(self, process_id: str) -> int:
        """
        Get the counter for a process.

        Args:
            process_id: Process id to look up

        Returns:
            Counter value, or 0 if the process is not tracked
        """
        with self._lock:
            return self._clock.get(process_id, 0)

    def format(self) -> str:
        return self.snapshot().format()

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"VectorClock({self._process_id}, {self.format()})"
