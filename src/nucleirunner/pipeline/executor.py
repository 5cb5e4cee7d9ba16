"""Executors that provision nuclei and run a scan.

Two variants share one interface:
- LocalExecutor runs every step against the local filesystem and process table.
- RemoteExecutor ships the ExecutionSpec over a RemoteChannel; the agent on
  the other side runs its own LocalExecutor.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional, Tuple

from nucleirunner.bootstrap.paths import output_file_name
from nucleirunner.bootstrap.platform import host_identity
from nucleirunner.bootstrap.provisioner import BinaryProvisioner
from nucleirunner.bootstrap.templates import TemplateProvisioner
from nucleirunner.core.errors import ExecutionCancelled, ProcessLaunchError
from nucleirunner.core.logging import get_logger
from nucleirunner.core.models import ExecutionResult, ExecutionSpec
from nucleirunner.core.streaming import LogSink
from nucleirunner.core.subprocess_runner import ProcessRunner
from nucleirunner.core.workspace import LocalWorkingDirectory
from nucleirunner.pipeline.arguments import build_mandatory_arguments, merge_extra_flags
from nucleirunner.pipeline.report_config import report_config_arguments, write_reporting_config

if TYPE_CHECKING:
    from nucleirunner.remote.channel import RemoteChannel

LOGGER = get_logger(__name__)


class Executor(ABC):
    """Runs the provision-and-scan sequence somewhere."""

    def __init__(self, cancel_event: Optional[threading.Event] = None) -> None:
        self._cancel_event = cancel_event

    def _check_cancelled(self, step: str) -> None:
        if self._cancel_event is not None and self._cancel_event.is_set():
            LOGGER.info(f"Cancelled before {step}")
            raise ExecutionCancelled(f"Execution cancelled before {step}")

    @abstractmethod
    def host_identity(self) -> Tuple[str, str]:
        """Raw (os_name, machine) of the host the scan will run on."""

    @abstractmethod
    def provision_and_run(self, spec: ExecutionSpec, log_sink: LogSink) -> ExecutionResult:
        """Provision the binary and templates, then run the scan.

        Returns:
            ExecutionResult of the scan process.

        Raises:
            NucleiRunnerError: On any fatal provisioning or launch failure.
        """


class LocalExecutor(Executor):
    """Executes against a local working directory."""

    def __init__(
        self,
        working_dir: LocalWorkingDirectory,
        provisioner: Optional[BinaryProvisioner] = None,
        runner: Optional[ProcessRunner] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """Initialize LocalExecutor.

        Args:
            working_dir: Directory owning all artifacts of the run.
            provisioner: Binary provisioner; built from the ExecutionSpec when None.
            runner: Process runner shared by template refresh and scan.
            cancel_event: Checked before each step; also cancels the default runner.
        """
        super().__init__(cancel_event)
        self._working_dir = working_dir
        self._provisioner = provisioner
        self._runner = runner or ProcessRunner(cancel_event)

    def host_identity(self) -> Tuple[str, str]:
        return host_identity()

    def provision_and_run(self, spec: ExecutionSpec, log_sink: LogSink) -> ExecutionResult:
        working_dir = self._working_dir
        provisioner = self._provisioner or BinaryProvisioner(
            version=spec.nuclei_version,
            verify_checksums=spec.verify_checksums,
        )

        self._check_cancelled("provisioning")
        binary = provisioner.ensure(working_dir, spec.platform)
        log_sink.write_line(f"Using nuclei binary: {binary.path}")

        self._check_cancelled("template refresh")
        templates_path = TemplateProvisioner(self._runner).refresh(binary, working_dir, log_sink)

        cli_arguments = build_mandatory_arguments(
            binary.path,
            templates_path,
            spec.target,
            working_dir.resolve(output_file_name(spec.run_id)),
        )
        report_config_path = write_reporting_config(working_dir, spec.reporting_config)
        cli_arguments.extend(report_config_arguments(report_config_path))

        command = merge_extra_flags(cli_arguments, spec.extra_flags)
        self._check_cancelled("scan")
        LOGGER.info(f"Running nuclei against {spec.target}")

        result = self._runner.run(command, log_sink, cwd=working_dir.path)
        if not result.reached_subprocess:
            raise ProcessLaunchError(result.error or f"Failed to launch {binary.path}")
        return result


class RemoteExecutor(Executor):
    """Executes on a remote agent reached through a channel."""

    def __init__(
        self,
        channel: "RemoteChannel",
        remote_path: str,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        super().__init__(cancel_event)
        self._channel = channel
        self._remote_path = remote_path

    def host_identity(self) -> Tuple[str, str]:
        return self._channel.host_identity()

    def provision_and_run(self, spec: ExecutionSpec, log_sink: LogSink) -> ExecutionResult:
        self._check_cancelled("dispatch")
        LOGGER.info(f"Dispatching scan of {spec.target} to {self._channel!r}")
        return self._channel.call(spec, self._remote_path, log_sink, self._cancel_event)
