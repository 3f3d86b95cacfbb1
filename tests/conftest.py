"""Shared test fixtures."""

import argparse
import subprocess
import sys
from pathlib import Path

import pytest

# Add project root to path for package imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class MockContext:
    """Mock Context for testing checks without running ctdb."""

    def __init__(
        self,
        command_outputs: dict[tuple, str | Exception | subprocess.CompletedProcess] | None = None,
    ):
        self.command_outputs = command_outputs or {}
        self.commands_run: list[list[str]] = []

    def run(
        self,
        cmd: list[str],
        check: bool = False,
        **kwargs,
    ) -> subprocess.CompletedProcess:
        """Return mocked command output."""
        self.commands_run.append(cmd)
        key = tuple(cmd)
        if key not in self.command_outputs:
            raise KeyError(f"No mock output for command: {cmd}")

        output = self.command_outputs[key]
        if isinstance(output, Exception):
            raise output

        # Allow passing CompletedProcess directly for more control (e.g., non-zero returncode)
        if isinstance(output, subprocess.CompletedProcess):
            return output

        return subprocess.CompletedProcess(
            cmd,
            returncode=0,
            stdout=output,
            stderr="",
        )


@pytest.fixture
def mock_context():
    """Factory fixture for creating MockContext instances."""
    def _create(**kwargs) -> MockContext:
        return MockContext(**kwargs)
    return _create


@pytest.fixture
def check_options():
    """Factory fixture for the options a check receives from the CLI."""
    def _create(**overrides) -> argparse.Namespace:
        values = {
            "info": "scriptstatus",
            "hostname": None,
            "login": None,
            "sudo": False,
            "warning": None,
            "critical": None,
            "timeout": 15,
            "verbose": False,
            "nodes_file": "/etc/ctdb/nodes",
            "ctdb_command": "ctdb",
            "ssh_command": "ssh",
            "sudo_command": "sudo",
            "log_dir": None,
        }
        values.update(overrides)
        return argparse.Namespace(**values)
    return _create


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to test fixtures directory."""
    return FIXTURES_DIR
