"""gRPC client for the calculator servers, carrying the client's vector clock."""

import asyncio
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import grpc

from common.causality import Relation, relation
from common.constants import (
    CALCULATE_PARTIAL_SUM_METHOD,
    EVENT_CALCULATION_COMPLETE,
    EVENT_CLIENT_START,
    EVENT_CLIENT_STOP,
    EVENT_HEALTH_CHECK,
    EVENT_REQUEST_INIT,
    HEALTH_CHECK_METHOD,
)
from common.event_log import EventLog
from common.exceptions import InvalidSnapshotError
from common.logging_config import get_logger
from common.protocol import HealthCheckReply, HealthCheckRequest, PartialSumRequest, SumReply
from common.ranges import divide_work
from common.types import ServerInfo
from common.vector_clock import ClockSnapshot, VectorClock
from cli.config import Config
from cli.utils import (
    banner,
    error,
    render_calculation,
    render_clock_analysis,
    render_event_log,
    render_health,
    render_server_status,
    warning,
)

logger = get_logger(__name__)


@dataclass
class PartialResult:
    """Outcome of one partial sum request."""
    server: ServerInfo
    start: int
    end: int
    sent_clock: ClockSnapshot
    reply: Optional[SumReply] = None
    error: Optional[str] = None
    relation: Optional[Relation] = None

    @property
    def ok(self) -> bool:
        return self.reply is not None


@dataclass
class CalculationReport:
    """Everything shown to the user after a distributed calculation."""
    n: int
    request_id: str
    mode: str
    results: List[PartialResult] = field(default_factory=list)
    total: Optional[int] = None
    elapsed_ms: int = 0
    final_clock: Optional[ClockSnapshot] = None

    @property
    def successful(self) -> List[PartialResult]:
        return sorted((r for r in self.results if r.ok), key=lambda r: r.reply.range_start)

    @property
    def expected(self) -> int:
        return self.n * (self.n + 1) // 2


class CalculatorClient:
    """
    Client process of the distributed calculator.

    Owns the client's vector clock and event log for the whole session.
    Every outgoing request carries a snapshot of the clock; every reply that
    actually arrives is merged back. Failed requests never touch the clock.
    """

    def __init__(
        self,
        config: Config,
        clock: Optional[VectorClock] = None,
        event_log: Optional[EventLog] = None
    ):
        """
        Initialize calculator client.

        Args:
            config: Configuration instance
            clock: Optional pre-built clock (defaults to one built from config)
            event_log: Optional event log (defaults to an unbounded log)

        Raises:
            ConfigurationError: If the configured roster or servers are invalid
        """
        self.config = config
        self.servers = config.get_servers()
        self.clock = clock or VectorClock(config.get_process_id(), config.get_roster())
        self.event_log = event_log or EventLog(self.clock.process_id)
        self.client_id = f"Client-{uuid.uuid4().hex[:8]}"
        logger.info(
            f"Initialized CalculatorClient [client_id={self.client_id}, "
            f"servers={[s.name for s in self.servers]}, clock={self.clock}]"
        )

    def start(self) -> None:
        """Record the start of the client session."""
        self.event_log.append(EVENT_CLIENT_START, "Client application started", self.clock.snapshot())

    def stop(self) -> None:
        """Record the end of the client session."""
        self.event_log.append(EVENT_CLIENT_STOP, "Client application stopped", self.clock.snapshot())

    async def probe(self, server: ServerInfo, timeout: float) -> Optional[HealthCheckReply]:
        """
        Send a HealthCheck to one server.

        Args:
            server: Target server
            timeout: Deadline in seconds

        Returns:
            HealthCheckReply, or None if the server is unreachable
        """
        try:
            async with grpc.aio.insecure_channel(server.address) as channel:
                multi_callable = channel.unary_unary(
                    HEALTH_CHECK_METHOD,
                    request_serializer=lambda x: x,
                    response_deserializer=lambda x: x,
                )
                response_bytes = await multi_callable(
                    HealthCheckRequest(client_id=self.client_id).to_json(),
                    timeout=timeout
                )
            return HealthCheckReply.from_json(response_bytes)
        except grpc.RpcError as e:
            logger.debug(f"Health check failed for {server.name}: {e.code()} - {e.details()}")
            return None
        except (InvalidSnapshotError, KeyError) as e:
            logger.warning(f"Malformed health reply from {server.name}: {e}")
            return None

    async def server_status(
        self,
        servers: Sequence[ServerInfo],
        timeout: float
    ) -> Dict[int, Optional[HealthCheckReply]]:
        """Probe servers in parallel, keyed by server id."""
        replies = await asyncio.gather(*(self.probe(server, timeout) for server in servers))
        return {server.id: reply for server, reply in zip(servers, replies)}

    async def request_partial_sum(
        self,
        server: ServerInfo,
        start: int,
        end: int,
        request_id: str,
        snapshot: ClockSnapshot
    ) -> PartialResult:
        """
        Ask one server for the sum of ``[start, end]``.

        Args:
            server: Target server
            start: First number of the range
            end: Last number of the range
            request_id: Id shared by all partial requests of one calculation
            snapshot: Client clock carried by the request

        Returns:
            PartialResult with either the reply or the error message
        """
        result = PartialResult(server=server, start=start, end=end, sent_clock=snapshot)
        request = PartialSumRequest(start=start, end=end, request_id=request_id, vector_clock=snapshot)
        try:
            async with grpc.aio.insecure_channel(server.address) as channel:
                multi_callable = channel.unary_unary(
                    CALCULATE_PARTIAL_SUM_METHOD,
                    request_serializer=lambda x: x,
                    response_deserializer=lambda x: x,
                )
                response_bytes = await multi_callable(
                    request.to_json(),
                    timeout=self.config.get_request_timeout()
                )
            result.reply = SumReply.from_json(response_bytes)
        except grpc.RpcError as e:
            logger.warning(f"Partial sum failed on {server.name}: {e.code()} - {e.details()}")
            result.error = e.details() or str(e.code())
        except (InvalidSnapshotError, KeyError) as e:
            logger.warning(f"Malformed partial sum reply from {server.name}: {e}")
            result.error = f"Malformed reply: {e}"
        return result

    async def run_calculation(
        self,
        n: int,
        servers: Sequence[ServerInfo],
        request_id: str,
        mode: str
    ) -> CalculationReport:
        """
        Distribute ``1..n`` over ``servers`` and merge the replies.

        Args:
            n: Upper bound of the sum
            servers: Servers to use (all assumed online)
            request_id: Calculation id
            mode: Label for the report ("auto" or "manual")

        Returns:
            CalculationReport; ``total`` is None when every server failed
        """
        report = CalculationReport(n=n, request_id=request_id, mode=mode)
        ranges = divide_work(n, len(servers))
        sent_clock = self.clock.snapshot()

        logger.info(f"Request {request_id}: n={n} over {len(servers)} server(s), VC {sent_clock}")
        started = time.perf_counter()
        report.results = list(await asyncio.gather(*(
            self.request_partial_sum(server, start, end, request_id, sent_clock)
            for server, (start, end) in zip(servers, ranges)
        )))
        report.elapsed_ms = int((time.perf_counter() - started) * 1000)

        successful = report.successful
        if not successful:
            logger.error(f"Request {request_id}: all servers failed")
            return report

        total = 0
        for result in successful:
            total += result.reply.partial_sum
            result.relation = relation(result.sent_clock, result.reply.vector_clock)
            self.clock.merge(result.reply.vector_clock)

        report.total = total
        report.final_clock = self.clock.increment()
        self.event_log.append(
            EVENT_CALCULATION_COMPLETE,
            f"Completed calculation for n={n}, result={total}",
            report.final_clock
        )
        logger.info(f"Request {request_id}: total={total} in {report.elapsed_ms}ms, VC {report.final_clock}")
        return report

    async def calculate_async(self, n: int) -> str:
        """
        Sum ``1..n`` over every online server.

        Args:
            n: Upper bound of the sum

        Returns:
            Rendered calculation report or an error message
        """
        snapshot = self.clock.increment()
        self.event_log.append(EVENT_REQUEST_INIT, f"Initiating calculation for n={n} (Auto mode)", snapshot)
        request_id = uuid.uuid4().hex[:8]

        lines = [banner("AUTO MODE - CHECKING ALL SERVERS", f"Current VC: {snapshot}")]

        status = await self.server_status(self.servers, self.config.get_probe_timeout())
        available = [server for server in self.servers if status[server.id] is not None]
        if not available:
            lines.append(error("No servers available! Please start at least one server."))
            return "\n".join(lines)

        report = await self.run_calculation(n, available, request_id, mode="auto")
        lines.append(render_calculation(report))
        return "\n".join(lines)

    async def calculate_with_selection_async(self, server_ids: Sequence[int], n: int) -> str:
        """
        Sum ``1..n`` over a manually selected set of servers.

        Args:
            server_ids: Ids of the servers to use
            n: Upper bound of the sum

        Returns:
            Rendered server status and calculation report, or an error message
        """
        lines = [banner("MANUAL SERVER SELECTION MODE")]

        status = await self.server_status(self.servers, self.config.get_probe_timeout())
        lines.append(render_server_status(self.servers, status))

        selected = [server for server in self.servers if server.id in server_ids]
        if not selected:
            lines.append(error("No valid servers selected."))
            return "\n".join(lines)

        offline = [server for server in selected if status[server.id] is None]
        online = [server for server in selected if status[server.id] is not None]
        if offline:
            lines.append(warning("Some selected servers are offline:"))
            lines.extend(f"   └─ {server.name}" for server in offline)
        if not online:
            lines.append(error("None of the selected servers are available!"))
            return "\n".join(lines)

        snapshot = self.clock.increment()
        ids = ",".join(str(server.id) for server in selected)
        self.event_log.append(EVENT_REQUEST_INIT, f"Initiating calculation for n={n} (Manual: {ids})", snapshot)
        request_id = uuid.uuid4().hex[:8]

        lines.append(banner("MANUAL MODE - USING SELECTED SERVERS", f"Current VC: {snapshot}"))
        report = await self.run_calculation(n, online, request_id, mode="manual")
        lines.append(render_calculation(report))
        return "\n".join(lines)

    async def check_health_async(self) -> str:
        """
        Report the health of every configured server.

        Returns:
            Rendered health report
        """
        snapshot = self.clock.increment()
        self.event_log.append(EVENT_HEALTH_CHECK, "Checking all servers", snapshot)

        status = await self.server_status(self.servers, self.config.get_health_timeout())
        return "\n".join([
            banner("SERVER HEALTH CHECK", f"Current VC: {snapshot}"),
            render_health(self.servers, status),
        ])

    def calculate(self, n: int) -> str:
        return asyncio.run(self.calculate_async(n))

    def calculate_with_selection(self, server_ids: Sequence[int], n: int) -> str:
        return asyncio.run(self.calculate_with_selection_async(server_ids, n))

    def check_health(self) -> str:
        return asyncio.run(self.check_health_async())

    def clock_report(self) -> str:
        """Render the current clock with a per-process breakdown."""
        return render_clock_analysis(
            self.clock.snapshot(),
            self.event_log,
            self.config.get_recent_events()
        )

    def event_report(self) -> str:
        """Render the event log summary and annotated timeline."""
        return render_event_log(self.event_log, self.config.get_timeline_window())
