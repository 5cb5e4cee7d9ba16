"""Scan command implementation."""

from __future__ import annotations

import sys
from argparse import Namespace
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from nucleirunner.cli.commands import Command
from nucleirunner.cli.exit_codes import (
    EXIT_BOOTSTRAP_FAILURE,
    EXIT_CANCELLED,
    EXIT_INVALID_USAGE,
    EXIT_SCANNER_ERROR,
)
from nucleirunner.core.errors import (
    ExecutionCancelled,
    NucleiRunnerError,
    ProvisioningError,
    UnsupportedPlatformError,
)
from nucleirunner.core.logging import get_logger
from nucleirunner.core.streaming import ConsoleLogSink, LogSink
from nucleirunner.core.workspace import (
    LocalWorkingDirectory,
    RemoteWorkingDirectory,
    WorkingDirectory,
)
from nucleirunner.pipeline.orchestrator import ExecutionOrchestrator
from nucleirunner.remote.ssh import SshChannel

if TYPE_CHECKING:
    from nucleirunner.config.models import RunnerConfig

LOGGER = get_logger(__name__)


class ScanCommand(Command):
    """Provisions nuclei and runs a scan, locally or on a remote agent."""

    def __init__(
        self,
        version: str,
        log_sink: Optional[LogSink] = None,
        orchestrator: Optional[ExecutionOrchestrator] = None,
    ):
        """Initialize ScanCommand.

        Args:
            version: Current nuclei-runner version string.
            log_sink: Build log sink (default: stdout, Rich formatted on a terminal).
            orchestrator: Orchestrator to use (default: a new one).
        """
        self._version = version
        self._log_sink = log_sink or ConsoleLogSink(use_rich=sys.stdout.isatty())
        self._orchestrator = orchestrator or ExecutionOrchestrator()

    @property
    def name(self) -> str:
        """Command identifier."""
        return "scan"

    def execute(self, args: Namespace, config: "RunnerConfig | None" = None) -> int:
        """Execute the scan command.

        Args:
            args: Parsed command-line arguments.
            config: Loaded configuration with CLI overrides applied.

        Returns:
            nuclei's exit code, or a nuclei-runner error exit code.
        """
        if config is None or not config.target:
            LOGGER.error("No target given. Use --target or set 'target' in the config file.")
            return EXIT_INVALID_USAGE

        try:
            working_dir = self._working_directory(config)
        except ValueError as e:
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE

        try:
            result = self._orchestrator.execute(
                config.target,
                config.extra_flags,
                config.reporting_config,
                working_dir,
                self._log_sink,
                run_id=getattr(args, "run_id", None),
                nuclei_version=config.nuclei_version,
                verify_checksums=config.verify_checksums,
            )
        except (UnsupportedPlatformError, ProvisioningError) as e:
            LOGGER.error(str(e))
            return EXIT_BOOTSTRAP_FAILURE
        except ExecutionCancelled as e:
            LOGGER.error(str(e))
            return EXIT_CANCELLED
        except NucleiRunnerError as e:
            LOGGER.error(str(e))
            return EXIT_SCANNER_ERROR

        return result.exit_code

    def _working_directory(self, config: "RunnerConfig") -> WorkingDirectory:
        """Build the working directory handle from configuration.

        Raises:
            ValueError: If remote execution is configured without a remote workdir.
        """
        remote = config.remote
        if remote.enabled:
            if not remote.workdir:
                raise ValueError("A remote working directory is required with a remote host.")
            channel = SshChannel(
                host=remote.host or "",
                user=remote.user,
                port=remote.port,
                key_path=remote.key_path,
                agent_command=remote.agent_command,
                strict_host_key=remote.strict_host_key,
            )
            return RemoteWorkingDirectory(remote.workdir, channel)

        root = Path(config.workdir) if config.workdir else Path.cwd()
        root.mkdir(parents=True, exist_ok=True)
        return LocalWorkingDirectory(root)
