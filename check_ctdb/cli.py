"""Command-line interface for check_ctdb."""

import argparse
import os
import signal
import sys
from pathlib import Path

from check_ctdb import __version__
from check_ctdb.checks import ping, scriptstatus
from check_ctdb.core.config import load_config
from check_ctdb.core.context import Context
from check_ctdb.core.errors import CheckError, UsageError
from check_ctdb.core.logging import open_logger
from check_ctdb.core.output import Output

CHECKS = {
    "scriptstatus": scriptstatus.run,
    "ping": ping.run,
}


class CheckTimeout(CheckError):
    """The check did not finish within --timeout seconds."""

    pass


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting with status 2."""

    def error(self, message):
        raise UsageError(message)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = ArgumentParser(
        prog="check_ctdb",
        description="Check CTDB event script status or node liveness",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"check_ctdb {__version__}",
    )
    parser.add_argument(
        "-i",
        "--info",
        required=True,
        help="Information to check: scriptstatus or ping",
    )
    parser.add_argument(
        "-H",
        "--hostname",
        help="Run ctdb on this host via ssh",
    )
    parser.add_argument(
        "-l",
        "--login",
        help="Remote login user (only with --hostname)",
    )
    parser.add_argument(
        "-s",
        "--sudo",
        action="store_true",
        help="Run commands with sudo",
    )
    parser.add_argument(
        "-w",
        "--warning",
        help="Warning range for responding nodes, plain or N%% of all nodes",
    )
    parser.add_argument(
        "-c",
        "--critical",
        help="Critical range for responding nodes, plain or N%% of all nodes",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=int,
        help="Seconds before the plugin times out (default: 15)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show stderr of the commands run",
    )
    parser.add_argument(
        "--nodes-file",
        help="CTDB nodes file (default: /etc/ctdb/nodes)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML config file",
    )
    return parser


def parse_options(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse arguments and fill unset values from configuration.

    Raises:
        UsageError: On invalid arguments or an unknown --info value
        ConfigError: On an invalid config file
    """
    opts = create_parser().parse_args(argv)

    if opts.info not in CHECKS:
        raise UsageError(
            f"Unknown info '{opts.info}', expected one of: {', '.join(CHECKS)}"
        )

    config = load_config(opts.config, env=dict(os.environ))

    if opts.timeout is None:
        opts.timeout = int(config["timeout"])
    if opts.timeout <= 0:
        raise UsageError(f"Timeout must be positive, got {opts.timeout}")
    if opts.nodes_file is None:
        opts.nodes_file = config["nodes_file"]

    opts.ctdb_command = config["ctdb"]
    opts.ssh_command = config["ssh"]
    opts.sudo_command = config["sudo"]
    opts.log_dir = config["log_dir"]
    return opts


def _alarm(timeout: int):
    def handler(signum, frame):
        raise CheckTimeout(f"Timeout: check execution aborted after {timeout}s")
    return handler


def _unexpected(error: Exception) -> str:
    return f"Unexpected error: {type(error).__name__}: {error}"


def main(argv: list[str] | None = None, context: Context | None = None) -> int:
    """Main entry point."""
    output = Output()

    try:
        opts = parse_options(argv)
    except CheckError as e:
        output.unknown(str(e))
        output.render()
        return output.exit_code

    if context is None:
        context = Context()

    previous = signal.signal(signal.SIGALRM, _alarm(opts.timeout))
    signal.alarm(opts.timeout)
    try:
        with open_logger(opts.info, opts.log_dir) as logger:
            logger.started(opts.hostname, opts.sudo)
            try:
                CHECKS[opts.info](opts, output, context, logger)
            except CheckError as e:
                logger.failed(e)
                output.unknown(str(e))
            except Exception as e:
                logger.failed(e)
                output.unknown(_unexpected(e))
            logger.finished(output)
    except CheckTimeout as e:
        output.unknown(str(e))
    except Exception as e:
        # e.g. an unwritable log_dir
        output.unknown(_unexpected(e))
    finally:
        signal.alarm(0)
        signal.signal(signal.SIGALRM, previous)

    output.render()
    return output.exit_code


if __name__ == "__main__":
    sys.exit(main())
