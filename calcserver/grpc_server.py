"""gRPC server implementation for a calculator server."""

import asyncio
import logging
import time
from datetime import datetime

import grpc
from grpc import aio

from common.causality import compare
from common.constants import (
    CALCULATOR_SERVICE_NAME,
    EVENT_CALCULATION_COMPLETE,
    EVENT_HEALTH_CHECK,
    EVENT_REQUEST_RECEIVED,
    EVENT_SERVER_START,
    MAX_PROCESSING_DELAY_MS,
    TIMESTAMP_FORMAT,
)
from common.event_log import EventLog
from common.exceptions import InvalidSnapshotError
from common.protocol import (
    HealthCheckRequest,
    HealthCheckReply,
    PartialSumRequest,
    SumReply,
)
from common.ranges import range_sum
from common.vector_clock import VectorClock, format_clock

logger = logging.getLogger(__name__)


def describe_received(comparison: int) -> str:
    """
    Describe a received clock relative to the local state before the merge.

    Args:
        comparison: compare(local_before, received)

    Returns:
        Human-readable causality verdict
    """
    if comparison < 0:
        return "CAUSALLY AFTER (received event happened after local state)"
    elif comparison > 0:
        return "CAUSALLY BEFORE (local state is ahead of received event)"
    return "CONCURRENT (events happened independently)"


class CalculatorServicer:
    """
    gRPC service implementation for the distributed calculator.

    Owns nothing global: the server's single vector clock and event log are
    injected and live as long as the process.
    """

    def __init__(
        self,
        server_name: str,
        clock: VectorClock,
        event_log: EventLog,
        max_processing_delay_ms: int = MAX_PROCESSING_DELAY_MS
    ):
        """
        Initialize servicer and record the server start event.

        Args:
            server_name: Display name reported to clients
            clock: The server process's vector clock
            event_log: The server process's event log
            max_processing_delay_ms: Cap for the simulated processing delay
        """
        self.server_name = server_name
        self.clock = clock
        self.event_log = event_log
        self.max_processing_delay_ms = max_processing_delay_ms
        self.request_count = 0
        self._start_time = time.monotonic()

        self.event_log.append(EVENT_SERVER_START, "Server initialization", self.clock.snapshot())
        logger.info(f"{server_name} started, initial vector clock: {self.clock}")

    def uptime_seconds(self) -> int:
        return int(time.monotonic() - self._start_time)

    async def HealthCheck(
        self,
        request_bytes: bytes,
        context: grpc.aio.ServicerContext
    ) -> bytes:
        """
        Handle HealthCheck RPC (unary).
        Counts as a local event on the server.

        Args:
            request_bytes: Serialized HealthCheckRequest
            context: gRPC context

        Returns:
            Serialized HealthCheckReply
        """
        try:
            request = HealthCheckRequest.from_json(request_bytes)
        except InvalidSnapshotError as e:
            logger.warning(f"Rejected malformed health check: {e}")
            await context.abort(grpc.StatusCode.INVALID_ARGUMENT, str(e))
            return b''

        snapshot = self.clock.increment()
        self.event_log.append(EVENT_HEALTH_CHECK, f"Health check from {request.client_id}", snapshot)

        uptime = self.uptime_seconds()
        logger.info(
            f"Health check from {request.client_id} | VC: {snapshot} | "
            f"Uptime: {uptime}s | Requests: {self.request_count}"
        )

        response = HealthCheckReply(
            is_healthy=True,
            server_name=self.server_name,
            uptime_seconds=uptime
        )
        return response.to_json()

    async def CalculatePartialSum(
        self,
        request_bytes: bytes,
        context: grpc.aio.ServicerContext
    ) -> bytes:
        """
        Handle CalculatePartialSum RPC (unary).
        Merges the sender's clock, computes the sum of the range and replies
        with the server's clock after completion.

        Args:
            request_bytes: Serialized PartialSumRequest
            context: gRPC context

        Returns:
            Serialized SumReply
        """
        try:
            request = PartialSumRequest.from_json(request_bytes)
            if request.start < 1 or request.end < request.start - 1:
                raise InvalidSnapshotError(f"Invalid range [{request.start}-{request.end}]")
        except InvalidSnapshotError as e:
            logger.warning(f"Rejected malformed partial sum request: {e}")
            await context.abort(grpc.StatusCode.INVALID_ARGUMENT, str(e))
            return b''

        self.request_count += 1
        request_number = self.request_count

        before, after = self.clock.exchange(request.vector_clock)
        self.event_log.append(
            EVENT_REQUEST_RECEIVED,
            f"Partial sum request [{request.start}-{request.end}] from RequestID: {request.request_id}",
            after
        )
        causality = describe_received(compare(before, request.vector_clock))

        numbers = request.end - request.start + 1
        logger.info(
            f"Partial sum request #{request_number} [{request.request_id}] "
            f"range {request.start}-{request.end} ({numbers} numbers)"
        )
        logger.info(
            f"Received VC: {format_clock(request.vector_clock)} | "
            f"Before: {before} | After: {after} | Causality: {causality}"
        )

        partial_sum = range_sum(request.start, request.end)

        processing_ms = min(numbers // 10, self.max_processing_delay_ms)
        if processing_ms > 0:
            await asyncio.sleep(processing_ms / 1000)

        final = self.clock.increment()
        self.event_log.append(
            EVENT_CALCULATION_COMPLETE,
            f"Calculated sum [{request.start}-{request.end}] = {partial_sum}",
            final
        )
        logger.info(
            f"Calculation complete: sum({request.start}-{request.end}) = {partial_sum} | "
            f"~{processing_ms}ms | Final VC: {final} | "
            f"Requests: {self.request_count} | Events logged: {len(self.event_log)}"
        )

        response = SumReply(
            partial_sum=partial_sum,
            server_name=self.server_name,
            timestamp=datetime.now().strftime(TIMESTAMP_FORMAT)[:-3],
            range_start=request.start,
            range_end=request.end,
            request_id=request.request_id,
            vector_clock=final
        )
        return response.to_json()


def create_server(servicer: CalculatorServicer) -> aio.Server:
    """
    Create and configure gRPC server.

    Args:
        servicer: CalculatorServicer owning the process's clock

    Returns:
        Configured gRPC server (no port bound yet)
    """
    server = aio.server()

    server.add_generic_rpc_handlers((
        grpc.method_handlers_generic_handler(
            CALCULATOR_SERVICE_NAME,
            {
                'HealthCheck': grpc.unary_unary_rpc_method_handler(
                    servicer.HealthCheck,
                    request_deserializer=lambda x: x,
                    response_serializer=lambda x: x,
                ),
                'CalculatePartialSum': grpc.unary_unary_rpc_method_handler(
                    servicer.CalculatePartialSum,
                    request_deserializer=lambda x: x,
                    response_serializer=lambda x: x,
                ),
            }
        ),
    ))

    return server
