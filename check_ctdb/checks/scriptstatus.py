"""
Check the status of CTDB event scripts.

Runs ``ctdb -X scriptstatus`` and reports WARNING when any event script
is neither OK nor DISABLED, or printed error output.

Two machine-readable layouts exist depending on the ctdb version:

    |Type|Name|Code|Status|Start|End|Error Output...|      (current)
    Type|Name|Code|Status|Start|End|Error Output...        (legacy)

The current layout starts every line with the delimiter, which shows up
as an empty first field.
"""

import argparse
from dataclasses import dataclass, field

from nagiosplugin.state import Ok, ServiceState, Warn

from check_ctdb.checks import ctdb_command
from check_ctdb.core.context import Context
from check_ctdb.core.logging import CheckLogger
from check_ctdb.core.output import Measurement, Output
from check_ctdb.core.runner import apply_exit_status, run_command
from check_ctdb.core.thresholds import check_threshold, resolve_threshold

FIELD_SEPARATOR = "|"

# Error output may itself contain the separator; extra columns are rejoined
ERROR_JOIN = ":"

FIXED_COLUMNS = 6

MESSAGE_SEPARATOR = ";;"

# Any script error at all is an alert
ERROR_THRESHOLD = "0"


@dataclass
class ScriptRecord:
    """One event script line."""

    type: str
    name: str
    code: int | None
    status: str
    start: str = ""
    end: str = ""
    error: str = ""


@dataclass
class ScriptSummary:
    """Counters and partial verdict for a scriptstatus run."""

    ok: int = 0
    disabled: int = 0
    error: int = 0
    total: int = 0
    state: ServiceState = Ok
    messages: list[str] = field(default_factory=list)


def split_fields(line: str) -> list[str]:
    """Split a record on the separator, dropping trailing empty columns."""
    fields = line.split(FIELD_SEPARATOR)
    while fields and fields[-1] == "":
        fields.pop()
    return fields


def _to_code(value: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        return None


def decode_legacy_layout(fields: list[str]) -> ScriptRecord:
    """Decode a record without the leading empty column."""
    padded = fields + [""] * (FIXED_COLUMNS - len(fields))
    type_, name, code, status, start, end = padded[:FIXED_COLUMNS]
    return ScriptRecord(
        type=type_,
        name=name,
        code=_to_code(code),
        status=status,
        start=start,
        end=end,
        error=ERROR_JOIN.join(fields[FIXED_COLUMNS:]),
    )


def decode_current_layout(fields: list[str]) -> ScriptRecord:
    """Decode a record that starts with an empty column."""
    return decode_legacy_layout(fields[1:])


def decode_record(line: str) -> ScriptRecord:
    """Pick the layout from the first field and decode the line."""
    fields = split_fields(line)
    if fields and fields[0] == "":
        return decode_current_layout(fields)
    return decode_legacy_layout(fields)


def parse_scriptstatus(lines: list[str]) -> list[ScriptRecord]:
    """
    Parse ``ctdb -X scriptstatus`` output.

    Args:
        lines: Output lines, header first

    Returns:
        One ScriptRecord per non-blank line after the header
    """
    return [decode_record(line) for line in lines[1:] if line.strip()]


def summarize(records: list[ScriptRecord]) -> ScriptSummary:
    """
    Count script states and derive the partial severity.

    Error output on any script, or a status other than OK/DISABLED,
    raises the severity to WARNING.
    """
    summary = ScriptSummary()

    for record in records:
        summary.total += 1

        if record.error:
            code = "" if record.code is None else record.code
            summary.messages.append(f"{record.name} ({record.status}={code}): {record.error}")
            summary.state = max(summary.state, Warn)

        if record.status == "OK":
            summary.ok += 1
        elif record.status == "DISABLED":
            summary.disabled += 1
        else:
            summary.error += 1
            summary.state = max(summary.state, Warn)

    return summary


def error_state(errors: int) -> ServiceState:
    """Failed scripts never leave the report below WARNING, nor push it higher."""
    return check_threshold(errors, warning=resolve_threshold(ERROR_THRESHOLD))


def run(
    opts: argparse.Namespace,
    output: Output,
    context: Context,
    logger: CheckLogger,
) -> None:
    """
    Run the scriptstatus check.

    Args:
        opts: Parsed options merged with configuration
        output: Report to fill
        context: Execution context
        logger: Run log
    """
    output.separator = MESSAGE_SEPARATOR

    result = run_command(ctdb_command(opts, "-X", "scriptstatus"), context)
    logger.command(result)

    summary = summarize(parse_scriptstatus(result.lines))
    for message in summary.messages:
        output.add_message(message)
    output.escalate(summary.state)

    apply_exit_status(result, output, verbose=opts.verbose)

    error_range = resolve_threshold(ERROR_THRESHOLD)
    if output.state == Ok:
        output.escalate(error_state(summary.error))

    output.set_summary(f"{summary.total} event scripts, {summary.error} errors")
    output.add_measurement(Measurement("ok", summary.ok, min=0, max=summary.total))
    output.add_measurement(Measurement("disabled", summary.disabled, min=0, max=summary.total))
    output.add_measurement(
        Measurement(
            "error",
            summary.error,
            warning=error_range,
            critical=error_range,
            min=0,
            max=summary.total,
        )
    )
    output.add_measurement(Measurement("total", summary.total, min=0))

    logger.summary(
        ok=summary.ok,
        disabled=summary.disabled,
        error=summary.error,
        total=summary.total,
    )
