"""Tests for the calculator gRPC servicer."""

import json
from unittest.mock import AsyncMock, Mock

import grpc
import pytest

from calcserver.grpc_server import CalculatorServicer, describe_received
from common.protocol import HealthCheckReply, HealthCheckRequest, PartialSumRequest, SumReply
from common.vector_clock import ClockSnapshot


@pytest.fixture
def servicer(server_clock, server_log):
    return CalculatorServicer('Server1', server_clock, server_log, max_processing_delay_ms=0)


@pytest.fixture
def context():
    """Mock gRPC context whose abort is awaitable."""
    ctx = Mock(spec=grpc.aio.ServicerContext)
    ctx.abort = AsyncMock()
    return ctx


def partial_sum_request(start, end, clock):
    return PartialSumRequest(
        start=start, end=end, request_id='req1',
        vector_clock=ClockSnapshot(clock)
    ).to_json()


def test_start_event_logged_without_tick(servicer, server_log):
    assert [r.event_type for r in server_log] == ['SERVER_START']
    assert servicer.clock.value_of('Server1') == 0


@pytest.mark.asyncio
async def test_health_check_ticks_local_clock(servicer, server_log, context):
    response = await servicer.HealthCheck(HealthCheckRequest(client_id='c1').to_json(), context)

    reply = HealthCheckReply.from_json(response)
    assert reply.is_healthy
    assert reply.server_name == 'Server1'
    assert servicer.clock.value_of('Server1') == 1
    assert server_log.tail(1)[0].event_type == 'HEALTH_CHECK'
    context.abort.assert_not_called()


@pytest.mark.asyncio
async def test_partial_sum_merges_then_ticks(servicer, server_log, context):
    response = await servicer.CalculatePartialSum(
        partial_sum_request(1, 34, {'Client': 1, 'Server1': 0, 'Server2': 0, 'Server3': 0}),
        context
    )

    reply = SumReply.from_json(response)
    assert reply.partial_sum == 595
    assert (reply.range_start, reply.range_end) == (1, 34)
    assert reply.request_id == 'req1'
    # receive tick plus completion tick
    assert reply.vector_clock == {'Client': 1, 'Server1': 2, 'Server2': 0, 'Server3': 0}

    received, complete = server_log.tail(2)
    assert received.event_type == 'REQUEST_RECEIVED'
    assert received.clock == {'Client': 1, 'Server1': 1, 'Server2': 0, 'Server3': 0}
    assert complete.event_type == 'CALCULATION_COMPLETE'
    assert complete.clock == reply.vector_clock
    assert servicer.request_count == 1


@pytest.mark.asyncio
async def test_partial_sum_ignores_unknown_processes(servicer, context):
    response = await servicer.CalculatePartialSum(
        partial_sum_request(1, 3, {'Client': 4, 'Intruder': 9}),
        context
    )

    reply = SumReply.from_json(response)
    assert 'Intruder' not in reply.vector_clock
    assert reply.vector_clock['Client'] == 4


@pytest.mark.asyncio
async def test_empty_range_sums_to_zero(servicer, context):
    response = await servicer.CalculatePartialSum(partial_sum_request(4, 3, {'Client': 1}), context)

    assert SumReply.from_json(response).partial_sum == 0
    context.abort.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize('body', [
    b'garbage',
    json.dumps({'start': 1, 'end': 5, 'vector_clock': {'Client': -3}}).encode('utf-8'),
    json.dumps({'start': 1, 'end': 5, 'vector_clock': {'Client': 'x'}}).encode('utf-8'),
    json.dumps({'start': 0, 'end': 5, 'vector_clock': {}}).encode('utf-8'),
    json.dumps({'start': 10, 'end': 5, 'vector_clock': {}}).encode('utf-8'),
    json.dumps({'start': True, 'end': 9.9, 'request_id': 1}).encode('utf-8'),
    json.dumps({'start': 1, 'end': 5, 'request_id': 7}).encode('utf-8'),
])
async def test_malformed_request_rejected_without_touching_clock(servicer, server_log, context, body):
    before = servicer.clock.snapshot()

    await servicer.CalculatePartialSum(body, context)

    context.abort.assert_awaited_once()
    assert context.abort.await_args.args[0] == grpc.StatusCode.INVALID_ARGUMENT
    assert servicer.clock.snapshot() == before
    assert len(server_log) == 1
    assert servicer.request_count == 0


@pytest.mark.asyncio
async def test_malformed_health_check_rejected(servicer, context):
    await servicer.HealthCheck(b'{not json', context)

    context.abort.assert_awaited_once()
    assert servicer.clock.value_of('Server1') == 0


def test_describe_received():
    assert describe_received(-1).startswith('CAUSALLY AFTER')
    assert describe_received(1).startswith('CAUSALLY BEFORE')
    assert describe_received(0).startswith('CONCURRENT')
