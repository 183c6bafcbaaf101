"""Rendering helpers for CLI output."""

from typing import Dict, Mapping, Optional, Sequence, TYPE_CHECKING

from common.event_log import EventLog, pairwise_causality
from common.protocol import HealthCheckReply
from common.types import ServerInfo
from common.vector_clock import format_clock
from cli.constants import GREEN, RED, RELATION_LABELS, RESET, YELLOW

if TYPE_CHECKING:
    from cli.calculator_client import CalculationReport

BOX_WIDTH = 62


def banner(title: str, subtitle: Optional[str] = None) -> str:
    """
    Draw a boxed heading.

    Args:
        title: Heading text
        subtitle: Optional second line (e.g. the current vector clock)

    Returns:
        Multi-line string
    """
    lines = ["", "╔" + "═" * BOX_WIDTH + "╗", f"║ {title:<{BOX_WIDTH - 1}}║"]
    if subtitle is not None:
        lines.append(f"║ {subtitle:<{BOX_WIDTH - 1}}║")
    lines.append("╚" + "═" * BOX_WIDTH + "╝")
    return "\n".join(lines)


def error(message: str) -> str:
    return f"{RED}❌ {message}{RESET}"


def warning(message: str) -> str:
    return f"{YELLOW}⚠️  {message}{RESET}"


def success(message: str) -> str:
    return f"{GREEN}✅ {message}{RESET}"


def describe_relation(relation: Optional[str]) -> str:
    """Label a causal relation for display; None means no predecessor."""
    if relation is None:
        return "-"
    return RELATION_LABELS[relation]


def render_server_status(
    servers: Sequence[ServerInfo],
    status: Mapping[int, Optional[HealthCheckReply]]
) -> str:
    """List servers with ONLINE/OFFLINE markers (manual selection screen)."""
    lines = ["", "📡 Server Status:"]
    for server in servers:
        state = "✅ ONLINE" if status.get(server.id) is not None else "❌ OFFLINE"
        lines.append(f"   {server.id}. {server.name:<12} ({server.address}) - {state}")
    return "\n".join(lines)


def render_health(
    servers: Sequence[ServerInfo],
    status: Mapping[int, Optional[HealthCheckReply]]
) -> str:
    """Render the health report for every server."""
    lines = [""]
    for server in servers:
        reply = status.get(server.id)
        if reply is None:
            lines.append(f"❌ {server.name:<12} | DOWN")
        elif reply.is_healthy:
            lines.append(f"✅ {server.name:<12} | HEALTHY | Uptime: {reply.uptime_seconds}s")
        else:
            lines.append(f"⚠️ {server.name:<12} | UNHEALTHY")
    return "\n".join(lines)


def render_calculation(report: "CalculationReport") -> str:
    """
    Render load distribution, per-server results with causality, and the
    final verification of a calculation.
    """
    lines = ["", f"✅ Using {len(report.results)} server(s):"]
    for result in report.results:
        lines.append(f"   └─ {result.server.name} ({result.server.address})")

    lines.append("")
    lines.append("📊 Load Distribution:")
    for result in report.results:
        count = result.end - result.start + 1
        share = count * 100.0 / report.n
        lines.append(
            f"   └─ {result.server.name:<12}: [{result.start:>6}-{result.end:>6}] = "
            f"{count:>6} nums ({share:.1f}%) | VC: {result.sent_clock}"
        )

    for result in report.results:
        if not result.ok:
            lines.append(error(f"{result.server.name}: {result.error}"))

    if report.total is None:
        lines.append(error("All servers failed!"))
        return "\n".join(lines)

    lines.append(banner("📥 RESULTS WITH VECTOR CLOCK ANALYSIS"))
    for result in report.successful:
        reply = result.reply
        lines.append("")
        lines.append(f"🔹 {reply.server_name}:")
        lines.append(f"   Range: [{reply.range_start}-{reply.range_end}] | Sum: {reply.partial_sum}")
        lines.append(f"   Sent VC:     {result.sent_clock}")
        lines.append(f"   Received VC: {format_clock(reply.vector_clock)}")
        lines.append(f"   Causality: {describe_relation(result.relation)}")

    lines.append(banner("✅ FINAL RESULT"))
    lines.append(f"📊 Total Sum (1 to {report.n}): {report.total}")
    lines.append(f"⏱️  Total Time: {report.elapsed_ms} ms")
    lines.append(f"🖥️  Servers: {len(report.successful)}/{len(report.results)}")
    lines.append(f"🆔 Request: {report.request_id}")
    lines.append(f"🎯 Mode: {report.mode}")
    lines.append(f"🕐 Final VC: {report.final_clock}")

    if report.total == report.expected:
        lines.append(success("Verification: CORRECT!"))
    else:
        lines.append(warning(f"Expected {report.expected}, got {report.total}"))
    return "\n".join(lines)


def render_clock_analysis(clock: Mapping, event_log: EventLog, recent: int) -> str:
    """
    Render the clock state, per-process breakdown and the most recent events.

    Args:
        clock: Current clock snapshot
        event_log: The client's event log
        recent: Number of recent events to list
    """
    lines = [banner("🕐 VECTOR CLOCK STATE & ANALYSIS")]
    lines.append("")
    lines.append("📊 Current Vector Clock State:")
    lines.append(f"   {format_clock(clock)}")
    lines.append("")
    lines.append("📈 Detailed Breakdown:")
    for pid, value in sorted(clock.items()):
        lines.append(f"   └─ {pid:<15}: {value:>3} events")

    lines.append("")
    lines.append(f"   Total Events Logged: {len(event_log)}")
    lines.append(f"   Processes Tracked: {len(clock)}")
    lines.append(f"⚡ Total Logical Events: {sum(clock.values())}")

    if len(event_log) >= 2:
        lines.append("")
        lines.append("🔍 Recent Causality Analysis:")
        for record in event_log.tail(recent):
            lines.append(
                f"   └─ [{record.event_type}] at {record.timestamp:%H:%M:%S.%f} | "
                f"VC: {record.clock}"
            )
    return "\n".join(lines)


def render_event_log(event_log: EventLog, window: int) -> str:
    """
    Render the per-type summary and the last ``window`` events, each with its
    causal relation to the previous event.
    """
    lines = [banner("📋 EVENT LOG WITH CAUSALITY INFORMATION")]
    if len(event_log) == 0:
        lines.append("   No events logged yet.")
        return "\n".join(lines)

    lines.append("")
    lines.append(f"📊 Total Events: {len(event_log)}")
    lines.append("")
    lines.append("📈 Event Type Summary:")
    summary: Dict[str, int] = event_log.summarize_by_type()
    for event_type, count in summary.items():
        lines.append(f"   └─ {event_type:<20}: {count:>3} events")

    lines.append("")
    lines.append(f"📜 Event Timeline (Last {window} events):")
    lines.append("─" * BOX_WIDTH)
    for index, (record, rel) in enumerate(pairwise_causality(event_log.tail(window)), start=1):
        lines.append("")
        lines.append(f"{index}. [{record.event_type}]")
        lines.append(f"   Time: {record.timestamp:%Y-%m-%d %H:%M:%S.%f}")
        lines.append(f"   Process: {record.process_id}")
        lines.append(f"   Vector Clock: {record.clock}")
        lines.append(f"   Description: {record.description}")
        if rel is not None:
            lines.append(f"   Relation to prev: {describe_relation(rel)}")
    lines.append("")
    lines.append("─" * BOX_WIDTH)
    return "\n".join(lines)
