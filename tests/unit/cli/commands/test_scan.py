"""Tests for scan command."""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import List
from unittest.mock import MagicMock

import pytest

from nucleirunner.cli.commands.scan import ScanCommand
from nucleirunner.cli.exit_codes import (
    EXIT_BOOTSTRAP_FAILURE,
    EXIT_CANCELLED,
    EXIT_INVALID_USAGE,
    EXIT_SCANNER_ERROR,
)
from nucleirunner.config.models import RemoteConfig, RunnerConfig
from nucleirunner.core.errors import (
    ConfigWriteError,
    ExecutionCancelled,
    ProvisioningError,
    UnsupportedPlatformError,
)
from nucleirunner.core.models import ExecutionResult
from nucleirunner.core.workspace import LocalWorkingDirectory, RemoteWorkingDirectory
from nucleirunner.remote.ssh import SshChannel


@pytest.fixture
def orchestrator() -> MagicMock:
    orchestrator = MagicMock()
    orchestrator.execute.return_value = ExecutionResult(exit_code=0, reached_subprocess=True)
    return orchestrator


def _command(orchestrator: MagicMock, log_sink) -> ScanCommand:
    return ScanCommand(version="0.0.0", log_sink=log_sink, orchestrator=orchestrator)


class TestScanCommand:
    """Tests for ScanCommand."""

    def test_command_name(self, orchestrator, log_sink) -> None:
        """Test command name property."""
        assert _command(orchestrator, log_sink).name == "scan"

    def test_missing_target(self, orchestrator, log_sink) -> None:
        """Test scan without a target is a usage error."""
        result = _command(orchestrator, log_sink).execute(Namespace(), RunnerConfig())
        assert result == EXIT_INVALID_USAGE
        orchestrator.execute.assert_not_called()

    def test_local_scan(self, tmp_path: Path, orchestrator, log_sink) -> None:
        """Test a local scan passes configuration to the orchestrator."""
        workdir = tmp_path / "work"
        config = RunnerConfig(
            target="https://app.example",
            extra_flags="-severity critical",
            reporting_config="issueTracker: jira",
            nuclei_version="3.3.9",
            verify_checksums=False,
            workdir=str(workdir),
        )

        result = _command(orchestrator, log_sink).execute(Namespace(run_id="5"), config)

        assert result == 0
        assert workdir.is_dir()
        args, kwargs = orchestrator.execute.call_args
        assert args[:3] == ("https://app.example", "-severity critical", "issueTracker: jira")
        assert isinstance(args[3], LocalWorkingDirectory)
        assert args[3].root == workdir.resolve()
        assert args[4] is log_sink
        assert kwargs == {"run_id": "5", "nuclei_version": "3.3.9", "verify_checksums": False}

    def test_scanner_exit_code_passes_through(self, tmp_path: Path, orchestrator, log_sink) -> None:
        orchestrator.execute.return_value = ExecutionResult(exit_code=1, reached_subprocess=True)
        config = RunnerConfig(target="https://app.example", workdir=str(tmp_path))
        assert _command(orchestrator, log_sink).execute(Namespace(), config) == 1

    def test_remote_scan(self, orchestrator, log_sink) -> None:
        """Test remote configuration builds an ssh-backed working directory."""
        config = RunnerConfig(
            target="https://app.example",
            remote=RemoteConfig(host="scanner", user="ci", port=2222, workdir="/srv/work"),
        )

        _command(orchestrator, log_sink).execute(Namespace(), config)

        working_dir = orchestrator.execute.call_args[0][3]
        assert isinstance(working_dir, RemoteWorkingDirectory)
        assert working_dir.path == "/srv/work"
        channel = working_dir.remote_channel()
        assert isinstance(channel, SshChannel)
        assert (channel.host, channel.user, channel.port) == ("scanner", "ci", 2222)

    def test_remote_without_workdir(self, orchestrator, log_sink) -> None:
        config = RunnerConfig(target="https://app.example", remote=RemoteConfig(host="scanner"))
        assert _command(orchestrator, log_sink).execute(Namespace(), config) == EXIT_INVALID_USAGE

    @pytest.mark.parametrize(
        "error, expected",
        [
            (UnsupportedPlatformError("Unsupported operating system: SunOS"), EXIT_BOOTSTRAP_FAILURE),
            (ProvisioningError("Checksum mismatch"), EXIT_BOOTSTRAP_FAILURE),
            (ExecutionCancelled("cancelled"), EXIT_CANCELLED),
            (ConfigWriteError("read-only"), EXIT_SCANNER_ERROR),
        ],
    )
    def test_error_exit_codes(
        self, tmp_path: Path, orchestrator, log_sink, error, expected: int
    ) -> None:
        orchestrator.execute.side_effect = error
        config = RunnerConfig(target="https://app.example", workdir=str(tmp_path))
        assert _command(orchestrator, log_sink).execute(Namespace(), config) == expected
