"""Top-level execution entry point for pipeline steps.

ExecutionOrchestrator resolves the platform once, picks a local or
remote executor from the working directory and hands it an
ExecutionSpec. Fatal errors propagate to the caller unchanged; the
scanner's own exit code is returned for the caller to interpret.
Provisioned binaries and templates are left in the working directory
as a cache for the next run.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Optional

from nucleirunner.bootstrap.platform import resolve_platform
from nucleirunner.bootstrap.provisioner import DEFAULT_VERSION
from nucleirunner.core.errors import RemoteExecutionError
from nucleirunner.core.logging import get_logger
from nucleirunner.core.models import ExecutionResult, ExecutionSpec
from nucleirunner.core.streaming import LogSink
from nucleirunner.core.workspace import LocalWorkingDirectory, WorkingDirectory
from nucleirunner.pipeline.executor import Executor, LocalExecutor, RemoteExecutor

LOGGER = get_logger(__name__)


def default_run_id() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")


class ExecutionOrchestrator:
    """Coordinates one scan execution for a pipeline step."""

    def execute(
        self,
        target: str,
        extra_flags: Optional[str],
        reporting_config: Optional[str],
        working_directory: WorkingDirectory,
        log_sink: LogSink,
        *,
        os_name: Optional[str] = None,
        machine: Optional[str] = None,
        run_id: Optional[str] = None,
        nuclei_version: str = DEFAULT_VERSION,
        verify_checksums: bool = True,
        cancel_event: Optional[threading.Event] = None,
    ) -> ExecutionResult:
        """Provision nuclei and scan `target`.

        Args:
            target: URL to scan (required).
            extra_flags: Whitespace-delimited extra nuclei flags.
            reporting_config: Issue tracker configuration text.
            working_directory: Local or remote working directory.
            log_sink: Build log receiving progress and scanner output.
            os_name: Raw OS name of the execution host. Asked from the
                executor when None.
            machine: Raw machine string of the execution host. Asked from
                the executor when None.
            run_id: Identifier for the output file name.
            nuclei_version: Pinned nuclei version.
            verify_checksums: Verify the release archive checksum.
            cancel_event: Set by the caller to abandon provisioning and
                terminate the scan process, local or remote.

        Returns:
            ExecutionResult of the scan process.

        Raises:
            ValueError: If target is empty.
            NucleiRunnerError: On any fatal platform, provisioning,
                configuration, launch or remote failure.
            ExecutionCancelled: If `cancel_event` was set.
        """
        if not target or not target.strip():
            raise ValueError("A target URL is required")

        executor = self._select_executor(working_directory, cancel_event)

        if os_name is None or machine is None:
            if executor is None:
                self._announce_remote(working_directory, log_sink)
            host_os, host_machine = executor.host_identity()
            os_name = os_name if os_name is not None else host_os
            machine = machine if machine is not None else host_machine

        platform = resolve_platform(os_name, machine)
        log_sink.write_line(f"Retrieved operating system: {platform.value}")
        if working_directory.is_remote():
            self._announce_remote(working_directory, log_sink)

        spec = ExecutionSpec(
            platform=platform,
            target=target.strip(),
            run_id=run_id or default_run_id(),
            nuclei_version=nuclei_version,
            extra_flags=extra_flags,
            reporting_config=reporting_config,
            verify_checksums=verify_checksums,
        )

        result = executor.provision_and_run(spec, log_sink)
        LOGGER.info(f"nuclei finished with exit code {result.exit_code}")
        return result

    def _select_executor(
        self,
        working_directory: WorkingDirectory,
        cancel_event: Optional[threading.Event],
    ) -> Optional[Executor]:
        """None for a remote working directory that has no channel."""
        if working_directory.is_remote():
            channel = working_directory.remote_channel()
            if channel is None:
                return None
            return RemoteExecutor(channel, working_directory.path, cancel_event=cancel_event)

        if not isinstance(working_directory, LocalWorkingDirectory):
            working_directory = LocalWorkingDirectory(working_directory.path)
        return LocalExecutor(working_directory, cancel_event=cancel_event)

    def _announce_remote(self, working_directory: WorkingDirectory, log_sink: LogSink) -> None:
        log_sink.write_line(f"Remote directory: {working_directory.path}")
        if working_directory.remote_channel() is None:
            raise RemoteExecutionError("The agent does not support remote operations!")
