"""Core check_ctdb functionality."""

from check_ctdb.core.context import CommandOutcome, Context
from check_ctdb.core.errors import CheckError, ConfigError, ThresholdError, UsageError
from check_ctdb.core.output import Measurement, Output
from check_ctdb.core.runner import ExecutionResult, apply_exit_status, build_command, run_command
from check_ctdb.core.thresholds import check_threshold, resolve_threshold

__all__ = [
    "CheckError",
    "CommandOutcome",
    "ConfigError",
    "Context",
    "ExecutionResult",
    "Measurement",
    "Output",
    "ThresholdError",
    "UsageError",
    "apply_exit_status",
    "build_command",
    "check_threshold",
    "resolve_threshold",
    "run_command",
]
