"""
Check that every CTDB node answers a ping.

The expected node count comes from the CTDB nodes file; ``ctdb -n all
ping`` is then checked line by line. User thresholds apply to the number
of responding nodes and may be given as a percentage of the expected
count.
"""

import argparse
import re
from dataclasses import dataclass, field

from nagiosplugin.state import Critical, Ok, ServiceState

from check_ctdb.checks import ctdb_command, wrap_command
from check_ctdb.core.context import Context
from check_ctdb.core.logging import CheckLogger
from check_ctdb.core.output import Measurement, Output
from check_ctdb.core.runner import apply_exit_status, run_command
from check_ctdb.core.thresholds import check_threshold, resolve_threshold

# response from 0 time=0.000054 sec  (3 clients)
RESPONSE_PATTERN = re.compile(
    r"^\s*response from (\d+) time=([\d.]+) sec\s+\((\d+) clients\)"
)

# Unable to get ping response from node 2
UNREACHABLE_PATTERN = re.compile(r"^\s*Unable to get ping response from node (\d+)")

RESPONSE = "response"
UNREACHABLE = "unreachable"
UNRECOGNIZED = "unrecognized"


@dataclass
class PingRecord:
    """One line of ping output."""

    kind: str
    line: str
    node: int | None = None
    time: float = 0.0
    clients: int = 0


@dataclass
class PingSummary:
    """Counters and partial verdict for a ping run."""

    expected: int
    nodes: int = 0
    time: float = 0.0
    clients: int = 0
    state: ServiceState = Ok
    messages: list[str] = field(default_factory=list)

    @property
    def missing(self) -> int:
        return max(self.expected - self.nodes, 0)


def count_nodes(lines: list[str]) -> int:
    """Count node entries, skipping blank lines and deleted (#) nodes."""
    return sum(1 for line in lines if line.strip() and not line.lstrip().startswith("#"))


def parse_ping_line(line: str) -> PingRecord:
    """Classify one line of ``ctdb -n all ping`` output."""
    match = RESPONSE_PATTERN.match(line)
    if match:
        return PingRecord(
            kind=RESPONSE,
            line=line,
            node=int(match.group(1)),
            time=float(match.group(2)),
            clients=int(match.group(3)),
        )

    match = UNREACHABLE_PATTERN.match(line)
    if match:
        return PingRecord(kind=UNREACHABLE, line=line, node=int(match.group(1)))

    return PingRecord(kind=UNRECOGNIZED, line=line)


def parse_ping(lines: list[str]) -> list[PingRecord]:
    """Parse every line of ping output."""
    return [parse_ping_line(line) for line in lines]


def summarize(records: list[PingRecord], expected: int) -> PingSummary:
    """
    Accumulate responding nodes and derive the partial severity.

    Unreachable nodes are reported by ctdb itself and only show up as
    missing. Unrecognized lines are critical, but every line is still
    consumed so the counters stay accurate.
    """
    summary = PingSummary(expected=expected)

    for record in records:
        if record.kind == RESPONSE:
            summary.nodes += 1
            summary.time += record.time
            summary.clients += record.clients
        elif record.kind == UNRECOGNIZED:
            summary.state = max(summary.state, Critical)
            summary.messages.append(f"'{record.line}' doesn't match regexp.")

    if summary.missing:
        summary.messages.append(f"{summary.missing} missing nodes.")

    return summary


def expected_nodes(
    opts: argparse.Namespace,
    output: Output,
    context: Context,
    logger: CheckLogger,
) -> int:
    """Read the nodes file (remotely when a host is given) and count nodes."""
    result = run_command(wrap_command(opts, "cat", opts.nodes_file), context)
    logger.command(result)
    apply_exit_status(result, output, verbose=opts.verbose)
    return count_nodes(result.lines)


def run(
    opts: argparse.Namespace,
    output: Output,
    context: Context,
    logger: CheckLogger,
) -> None:
    """
    Run the ping check.

    Args:
        opts: Parsed options merged with configuration
        output: Report to fill
        context: Execution context
        logger: Run log
    """
    expected = expected_nodes(opts, output, context, logger)

    warning = resolve_threshold(opts.warning, expected)
    critical = resolve_threshold(opts.critical, expected)

    result = run_command(ctdb_command(opts, "-n", "all", "ping"), context)
    logger.command(result)

    summary = summarize(parse_ping(result.lines), expected)
    for message in summary.messages:
        output.add_message(message)
    output.escalate(summary.state)

    apply_exit_status(result, output, verbose=opts.verbose)

    if output.state == Ok:
        output.escalate(check_threshold(summary.nodes, warning, critical))

    output.set_summary(f"{summary.nodes} of {expected} nodes responding")
    output.add_measurement(
        Measurement(
            "nodes",
            summary.nodes,
            warning=warning,
            critical=critical,
            min=0,
            max=expected,
        )
    )
    output.add_measurement(Measurement("time", round(summary.time, 6), uom="s", min=0))
    output.add_measurement(Measurement("clients", summary.clients, min=0))

    logger.summary(
        expected=expected,
        nodes=summary.nodes,
        missing=summary.missing,
        time=summary.time,
        clients=summary.clients,
    )
