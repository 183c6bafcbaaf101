"""Shared RPC/protocol message definitions (serialization formats)."""

from dataclasses import dataclass, field
import json

from common.exceptions import InvalidSnapshotError
from common.vector_clock import ClockSnapshot


def _decode(data: bytes) -> dict:
    """Decode a JSON object, mapping decode failures to InvalidSnapshotError."""
    try:
        obj = json.loads(data)
    except (ValueError, TypeError) as e:
        raise InvalidSnapshotError(f"Malformed message: {e}")
    if not isinstance(obj, dict):
        raise InvalidSnapshotError("Malformed message: expected a JSON object")
    return obj


def _int_field(obj: dict, key: str) -> int:
    """Read a required integer field; JSON booleans and floats are rejected."""
    if key not in obj:
        raise InvalidSnapshotError(f"Missing field in request: {key}")
    value = obj[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidSnapshotError(f"Field {key} must be an integer, got {value!r}")
    return value


@dataclass
class HealthCheckRequest:
    """Request message for HealthCheck RPC."""
    client_id: str

    def to_json(self) -> bytes:
        """Serialize to JSON bytes."""
        return json.dumps({'client_id': self.client_id}).encode('utf-8')

    @classmethod
    def from_json(cls, data: bytes) -> 'HealthCheckRequest':
        """Deserialize from JSON bytes."""
        obj = _decode(data)
        return cls(client_id=obj.get('client_id', ''))


@dataclass
class HealthCheckReply:
    """Response message for HealthCheck RPC."""
    is_healthy: bool
    server_name: str
    uptime_seconds: int

    def to_json(self) -> bytes:
        """Serialize to JSON bytes."""
        return json.dumps({
            'is_healthy': self.is_healthy,
            'server_name': self.server_name,
            'uptime_seconds': self.uptime_seconds
        }).encode('utf-8')

    @classmethod
    def from_json(cls, data: bytes) -> 'HealthCheckReply':
        """Deserialize from JSON bytes."""
        obj = _decode(data)
        return cls(
            is_healthy=obj['is_healthy'],
            server_name=obj['server_name'],
            uptime_seconds=obj['uptime_seconds']
        )


@dataclass
class PartialSumRequest:
    """
    Request message for CalculatePartialSum RPC.

    Carries the sender's clock snapshot taken when the request was issued.
    """
    start: int
    end: int
    request_id: str
    vector_clock: ClockSnapshot = field(default_factory=ClockSnapshot)

    def to_json(self) -> bytes:
        """Serialize to JSON bytes."""
        return json.dumps({
            'start': self.start,
            'end': self.end,
            'request_id': self.request_id,
            'vector_clock': self.vector_clock.to_dict()
        }).encode('utf-8')

    @classmethod
    def from_json(cls, data: bytes) -> 'PartialSumRequest':
        """
        Deserialize from JSON bytes.

        Raises:
            InvalidSnapshotError: If the message or its clock is malformed
        """
        obj = _decode(data)
        request_id = obj.get('request_id', '')
        if not isinstance(request_id, str):
            raise InvalidSnapshotError(f"request_id must be a string, got {request_id!r}")
        return cls(
            start=_int_field(obj, 'start'),
            end=_int_field(obj, 'end'),
            request_id=request_id,
            vector_clock=ClockSnapshot.from_wire(obj.get('vector_clock'))
        )


@dataclass
class SumReply:
    """
    Response message for CalculatePartialSum RPC.

    Carries the server's clock snapshot after it finished the request.
    """
    partial_sum: int
    server_name: str
    timestamp: str
    range_start: int
    range_end: int
    request_id: str
    vector_clock: ClockSnapshot = field(default_factory=ClockSnapshot)

    def to_json(self) -> bytes:
        """Serialize to JSON bytes."""
        return json.dumps({
            'partial_sum': self.partial_sum,
            'server_name': self.server_name,
            'timestamp': self.timestamp,
            'range_start': self.range_start,
            'range_end': self.range_end,
            'request_id': self.request_id,
            'vector_clock': self.vector_clock.to_dict()
        }).encode('utf-8')

    @classmethod
    def from_json(cls, data: bytes) -> 'SumReply':
        """
        Deserialize from JSON bytes.

        Raises:
            InvalidSnapshotError: If the reply clock is malformed
        """
        obj = _decode(data)
        return cls(
            partial_sum=obj['partial_sum'],
            server_name=obj['server_name'],
            timestamp=obj.get('timestamp', ''),
            range_start=obj['range_start'],
            range_end=obj['range_end'],
            request_id=obj.get('request_id', ''),
            vector_clock=ClockSnapshot.from_wire(obj.get('vector_clock'))
        )
