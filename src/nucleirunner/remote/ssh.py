"""SSH channel to a remote agent using the system ssh client."""

from __future__ import annotations

import json
import shlex
import subprocess
import threading
from typing import List, Optional, Tuple

from nucleirunner.core.errors import RemoteExecutionError
from nucleirunner.core.logging import get_logger
from nucleirunner.core.models import ExecutionResult, ExecutionSpec
from nucleirunner.core.streaming import LogSink
from nucleirunner.core.subprocess_runner import ProcessRunner
from nucleirunner.remote.channel import AgentOutputSink, RemoteChannel

LOGGER = get_logger(__name__)

DEFAULT_AGENT_COMMAND = "nuclei-runner"


class SshChannel(RemoteChannel):
    """Runs the nuclei-runner agent on another host over ssh.

    The remote host needs nuclei-runner installed; `agent_command` is the
    command that starts it there.
    """

    def __init__(
        self,
        host: str,
        user: Optional[str] = None,
        port: int = 22,
        key_path: Optional[str] = None,
        agent_command: str = DEFAULT_AGENT_COMMAND,
        strict_host_key: bool = True,
        connect_timeout: int = 10,
        runner: Optional[ProcessRunner] = None,
    ) -> None:
        if not host:
            raise ValueError("SSH host is required")
        self.host = host
        self.user = user
        self.port = port
        self.key_path = key_path
        self.agent_command = agent_command
        self.strict_host_key = strict_host_key
        self.connect_timeout = connect_timeout
        self._runner = runner or ProcessRunner()

    def call(
        self,
        spec: ExecutionSpec,
        remote_path: str,
        log_sink: LogSink,
        cancel_event: Optional[threading.Event] = None,
    ) -> ExecutionResult:
        remote_command = (
            f"{self.agent_command} agent --workdir {shlex.quote(remote_path)}"
        )
        sink = AgentOutputSink(log_sink)
        result = self._runner.run(
            self._build_command(remote_command),
            sink,
            stdin_data=json.dumps(spec.to_dict()) + "\n",
            cancel_event=cancel_event,
        )
        if not result.reached_subprocess:
            raise RemoteExecutionError(f"Could not start ssh: {result.error}")
        return sink.outcome(result.exit_code)

    def host_identity(self) -> Tuple[str, str]:
        completed = self._run("uname -s -m")
        if completed.returncode != 0:
            raise RemoteExecutionError(
                f"Could not detect platform of {self.host}: {completed.stderr.strip()}"
            )
        parts = completed.stdout.split()
        if len(parts) != 2:
            raise RemoteExecutionError(
                f"Unexpected platform description from {self.host}: {completed.stdout!r}"
            )
        return parts[0], parts[1]

    def _run(self, command: str) -> subprocess.CompletedProcess:
        ssh_command = self._build_command(command)
        LOGGER.debug(f"Running: {' '.join(ssh_command)}")
        try:
            return subprocess.run(
                ssh_command,
                capture_output=True,
                text=True,
                encoding="utf-8",
                check=False,
            )
        except OSError as e:
            raise RemoteExecutionError(f"SSH execution failed: {e}") from e

    def _build_command(self, command: str) -> List[str]:
        target = f"{self.user}@{self.host}" if self.user else self.host
        ssh_command: List[str] = ["ssh", "-p", str(self.port)]
        ssh_command.extend(["-o", "BatchMode=yes"])
        ssh_command.extend(["-o", f"ConnectTimeout={self.connect_timeout}"])
        if self.key_path:
            ssh_command.extend(["-i", self.key_path])
        if not self.strict_host_key:
            ssh_command.extend(
                ["-o", "StrictHostKeyChecking=no", "-o", "UserKnownHostsFile=/dev/null"]
            )
        ssh_command.append(target)
        ssh_command.append(command)
        return ssh_command

    def __repr__(self) -> str:
        target = f"{self.user}@{self.host}" if self.user else self.host
        return f"SshChannel({target}:{self.port})"
