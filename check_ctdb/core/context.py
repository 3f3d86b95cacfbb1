"""Execution context for testability."""

import os
import subprocess
import tempfile


class CommandOutcome(subprocess.CompletedProcess):
    """CompletedProcess that also knows whether the child dumped core."""

    def __init__(self, args, returncode, stdout=None, stderr=None, core_dumped=False):
        super().__init__(args, returncode, stdout, stderr)
        self.core_dumped = core_dumped


class Context:
    """
    Wraps external calls for testability.

    In production: executes real commands
    In tests: can be replaced with MockContext
    """

    def run(
        self,
        cmd: list[str],
        check: bool = False,
        **kwargs,
    ) -> CommandOutcome:
        """
        Run a command and return result.

        Stderr goes to an anonymous temporary file instead of a pipe so the
        child can never block on it while stdout is being read. The child is
        reaped with waitpid so the raw wait status (and with it the core dump
        flag) is still available. Output of both streams is decoded as UTF-8
        with undecodable bytes replaced, since event scripts print free text.

        Args:
            cmd: Command and arguments as list
            check: Raise on non-zero exit code
            **kwargs: Additional subprocess.Popen arguments

        Returns:
            CommandOutcome with stdout, stderr, returncode, core_dumped

        Raises:
            OSError: If the command cannot be started
        """
        with tempfile.TemporaryFile() as errbuf:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=errbuf,
                **kwargs,
            )
            try:
                with proc.stdout:
                    stdout = proc.stdout.read().decode(errors="replace")
                _, status = os.waitpid(proc.pid, 0)
            except BaseException:
                # Interrupted, e.g. by the timeout alarm: do not leave a zombie
                proc.kill()
                os.waitpid(proc.pid, 0)
                raise
            proc.returncode = os.waitstatus_to_exitcode(status)

            errbuf.seek(0)
            stderr = errbuf.read().decode(errors="replace")

        result = CommandOutcome(
            cmd,
            proc.returncode,
            stdout=stdout,
            stderr=stderr,
            core_dumped=os.WIFSIGNALED(status) and os.WCOREDUMP(status),
        )
        if check:
            result.check_returncode()
        return result
