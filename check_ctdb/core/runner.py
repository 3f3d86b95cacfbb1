"""Command execution and exit status classification."""

import shlex
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from nagiosplugin.state import Warn

if TYPE_CHECKING:
    from check_ctdb.core.context import Context
    from check_ctdb.core.output import Output

# ssh exits with 255 when the remote side could not be reached; ctdb uses
# the same value when some nodes did not answer.
PARTIAL_AVAILABILITY = 255


@dataclass
class ExecutionResult:
    """Captured outcome of one external command."""

    command: list[str]
    lines: list[str] = field(default_factory=list)
    stderr: str = ""
    returncode: int | None = None
    signal: int | None = None
    core_dumped: bool = False
    error: str | None = None

    @property
    def started(self) -> bool:
        """True if the process could be spawned at all."""
        return self.error is None

    @property
    def command_line(self) -> str:
        """Command as a single shell-quoted string."""
        return shlex.join(self.command)


def build_command(
    base: list[str],
    hostname: str | None = None,
    login: str | None = None,
    sudo: bool = False,
    ssh: str = "ssh",
    sudo_command: str = "sudo",
) -> list[str]:
    """
    Wrap a command for privilege escalation and remote execution.

    Args:
        base: Command and arguments to run
        hostname: Remote host; commands run locally when None
        login: Remote login user, ignored without a hostname
        sudo: Prefix with the privilege escalation tool
        ssh: Remote execution tool
        sudo_command: Privilege escalation tool

    Returns:
        sudo, then ssh with its login flag, then the host, then ``base``
    """
    cmd = list(base)

    if hostname:
        remote = [ssh]
        if login:
            remote.extend(["-l", login])
        cmd = remote + [hostname] + cmd

    if sudo:
        cmd = [sudo_command] + cmd

    return cmd


def run_command(cmd: list[str], context: "Context") -> ExecutionResult:
    """
    Run a command and capture its output.

    Stdout is split into lines; stderr is kept apart so it never reaches
    the monitoring system's own error channel.

    Args:
        cmd: Command and arguments
        context: Execution context

    Returns:
        ExecutionResult; ``error`` is set and ``lines`` empty if the
        process could not be started
    """
    try:
        completed = context.run(cmd)
    except OSError as e:
        return ExecutionResult(command=cmd, error=str(e))

    returncode = completed.returncode
    signal = -returncode if returncode is not None and returncode < 0 else None

    return ExecutionResult(
        command=cmd,
        lines=(completed.stdout or "").splitlines(),
        stderr=completed.stderr or "",
        returncode=returncode,
        signal=signal,
        core_dumped=getattr(completed, "core_dumped", False),
    )


def apply_exit_status(
    result: ExecutionResult,
    output: "Output",
    verbose: bool = False,
) -> None:
    """
    Fold the process exit status into the report.

    Called after the output lines were parsed, so the generic message for
    partial availability is only added when parsing produced no message.

    Args:
        result: Outcome of run_command
        output: Report to update
        verbose: Also add captured stderr to the long output
    """
    if verbose and result.stderr.strip():
        output.add_long_output(result.stderr)

    if not result.started:
        output.critical(f'Cannot run "{result.command_line}": {result.error}')
        return

    if result.signal is not None:
        coredump = "with" if result.core_dumped else "without"
        output.critical(
            f'"{result.command_line}" died with signal {result.signal}, {coredump} coredump'
        )
        return

    if result.returncode == PARTIAL_AVAILABILITY:
        message = None
        if not output.messages:
            message = f'"{result.command_line}" exited with value {result.returncode}'
        output.escalate(Warn, message)
        return

    if result.returncode:
        output.critical(f'"{result.command_line}" exited with value {result.returncode}')
