"""JSONL run log for check invocations."""

import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from check_ctdb.core.output import Output
    from check_ctdb.core.runner import ExecutionResult


def get_log_path(check_name: str, base_path: Path) -> Path:
    """
    Get the log file path for a check.

    Args:
        check_name: Check mode, e.g. "ping"
        base_path: Base directory for logs

    Returns:
        Path to the log file: {base}/{date}/{check}.jsonl
    """
    today = date.today().isoformat()
    return base_path / today / f"{check_name}.jsonl"


class CheckLogger:
    """
    Records one check invocation as a sequence of events.

    Every event is one JSON object per line: ``started``, one ``command``
    per external command, the mode's ``summary`` counters, then either
    ``failed`` or ``finished``. The file is only created on the first
    event, and nothing goes to stdout, which carries the plugin line.
    """

    def __init__(self, check_name: str, log_path: Path):
        self.check_name = check_name
        self.log_path = log_path
        self._file = None

    def _write(self, event: str, **fields: Any) -> None:
        if self._file is None:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.log_path, "a")
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "check": self.check_name,
            "event": event,
            **fields,
        }
        self._file.write(json.dumps(entry, default=str) + "\n")
        self._file.flush()

    def started(self, hostname: str | None, sudo: bool) -> None:
        """Log where and how the check is about to run."""
        self._write("started", hostname=hostname, sudo=sudo)

    def command(self, result: "ExecutionResult") -> None:
        """Log the outcome of one external command."""
        self._write(
            "command",
            command=result.command,
            returncode=result.returncode,
            signal=result.signal,
            core_dumped=result.core_dumped,
            error=result.error,
            lines=len(result.lines),
        )

    def summary(self, **counters: Any) -> None:
        """Log the counters a mode derived from the command output."""
        self._write("summary", **counters)

    def failed(self, error: BaseException) -> None:
        """Log an error that turned the run into UNKNOWN."""
        self._write("failed", error=str(error), type=type(error).__name__)

    def finished(self, output: "Output") -> None:
        """Log the verdict handed to the monitoring system."""
        self._write(
            "finished",
            state=str(output.state),
            exit_code=output.exit_code,
            summary=output.summary,
        )

    def close(self) -> None:
        """Close the log file."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "CheckLogger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class NullLogger(CheckLogger):
    """Logger used when no log directory is configured."""

    def __init__(self, check_name: str = ""):
        self.check_name = check_name
        self.log_path = None
        self._file = None

    def _write(self, event: str, **fields: Any) -> None:
        pass


def open_logger(check_name: str, log_dir: str | Path | None) -> CheckLogger:
    """Return a file logger under ``log_dir``, or a NullLogger if unset."""
    if not log_dir:
        return NullLogger(check_name)
    return CheckLogger(check_name, get_log_path(check_name, Path(log_dir)))
