"""Check modes: one module per ``--info`` value."""

import argparse

from check_ctdb.core.runner import build_command


def wrap_command(opts: argparse.Namespace, *args: str) -> list[str]:
    """Build the argv for ``args`` using the remote/sudo options in ``opts``."""
    return build_command(
        list(args),
        hostname=opts.hostname,
        login=opts.login,
        sudo=opts.sudo,
        ssh=opts.ssh_command,
        sudo_command=opts.sudo_command,
    )


def ctdb_command(opts: argparse.Namespace, *args: str) -> list[str]:
    """Wrapped argv for a ctdb subcommand."""
    return wrap_command(opts, opts.ctdb_command, *args)
