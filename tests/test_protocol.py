"""Tests for message serialization."""

import json

import pytest

from common.exceptions import InvalidSnapshotError
from common.protocol import HealthCheckRequest, PartialSumRequest, SumReply
from common.vector_clock import ClockSnapshot


def test_partial_sum_request_carries_clock():
    request = PartialSumRequest(
        start=1, end=50, request_id='abc123',
        vector_clock=ClockSnapshot({'Client': 2, 'Server1': 0})
    )

    payload = json.loads(request.to_json())

    assert payload['vector_clock'] == {'Client': 2, 'Server1': 0}
    decoded = PartialSumRequest.from_json(request.to_json())
    assert decoded.vector_clock == {'Client': 2, 'Server1': 0}
    assert isinstance(decoded.vector_clock, ClockSnapshot)


def test_request_without_clock_gets_empty_snapshot():
    decoded = PartialSumRequest.from_json(b'{"start": 1, "end": 3, "request_id": "r"}')
    assert len(decoded.vector_clock) == 0


@pytest.mark.parametrize('body', [
    b'not json',
    b'[1, 2, 3]',
    b'{"start": "one", "end": 3}',
    b'{"end": 3}',
    b'{"start": 1, "end": 3, "vector_clock": {"Client": -1}}',
    b'{"start": 1, "end": 3, "vector_clock": {"Client": "2"}}',
    b'{"start": 1, "end": 3, "vector_clock": [1]}',
    b'{"start": true, "end": 9}',
    b'{"start": 1, "end": 9.9}',
    b'{"start": 1, "end": 9, "request_id": 1}',
    b'{"start": true, "end": 9.9, "request_id": 1}',
])
def test_malformed_partial_sum_request(body):
    with pytest.raises(InvalidSnapshotError):
        PartialSumRequest.from_json(body)


def test_sum_reply_rejects_malformed_clock():
    body = json.dumps({
        'partial_sum': 6, 'server_name': 'Server1', 'timestamp': '',
        'range_start': 1, 'range_end': 3, 'request_id': 'r',
        'vector_clock': {'Server1': 1.5},
    }).encode('utf-8')

    with pytest.raises(InvalidSnapshotError):
        SumReply.from_json(body)


def test_sum_reply_missing_field():
    with pytest.raises(KeyError):
        SumReply.from_json(b'{"server_name": "Server1"}')


def test_health_check_request_defaults_client_id():
    assert HealthCheckRequest.from_json(b'{}').client_id == ''
