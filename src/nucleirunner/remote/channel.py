"""Remote channel abstraction and the agent wire format.

An agent prints scanner output as plain lines, followed by exactly one
marker line carrying either the result or the error:

    ::nuclei-runner-result::{"exit_code": 0, "reached_subprocess": true, "error": null}
    ::nuclei-runner-error::{"type": "ProvisioningError", "message": "..."}

Everything before the marker is forwarded to the caller's log sink.
"""

from __future__ import annotations

import json
import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple, Type

from nucleirunner.core import errors
from nucleirunner.core.errors import NucleiRunnerError, RemoteExecutionError
from nucleirunner.core.models import ExecutionResult, ExecutionSpec
from nucleirunner.core.streaming import LogSink

RESULT_MARKER = "::nuclei-runner-result::"
ERROR_MARKER = "::nuclei-runner-error::"

# Errors an agent may report, by class name.
_REMOTE_ERRORS: Dict[str, Type[NucleiRunnerError]] = {
    cls.__name__: cls
    for cls in (
        errors.UnsupportedPlatformError,
        errors.ProvisioningError,
        errors.ConfigWriteError,
        errors.ProcessLaunchError,
        errors.ExecutionCancelled,
        errors.RemoteExecutionError,
    )
}


class RemoteChannel(ABC):
    """Connection to a worker host able to run one ExecutionSpec."""

    @abstractmethod
    def call(
        self,
        spec: ExecutionSpec,
        remote_path: str,
        log_sink: LogSink,
        cancel_event: Optional[threading.Event] = None,
    ) -> ExecutionResult:
        """Run `spec` on the agent inside `remote_path`, blocking until done.

        Output lines are forwarded to `log_sink` as they arrive. Setting
        `cancel_event` stops the transport and raises ExecutionCancelled.

        Raises:
            NucleiRunnerError: The error reported by the agent, or
                RemoteExecutionError if the channel itself failed.
        """

    @abstractmethod
    def host_identity(self) -> Tuple[str, str]:
        """Raw (os_name, machine) of the agent host."""


def encode_result(result: ExecutionResult) -> str:
    return RESULT_MARKER + json.dumps(result.to_dict())


def encode_error(error: NucleiRunnerError) -> str:
    return ERROR_MARKER + json.dumps({"type": type(error).__name__, "message": str(error)})


def decode_error(payload: Dict[str, str]) -> NucleiRunnerError:
    """Rebuild an agent-reported error; unknown types become RemoteExecutionError."""
    error_cls = _REMOTE_ERRORS.get(payload.get("type", ""), RemoteExecutionError)
    return error_cls(payload.get("message", "Remote execution failed"))


class AgentOutputSink(LogSink):
    """Forwards agent output to a log sink and captures the marker line."""

    def __init__(self, log_sink: LogSink) -> None:
        self._log_sink = log_sink
        self._lock = threading.Lock()
        self._result: Optional[ExecutionResult] = None
        self._error: Optional[NucleiRunnerError] = None

    def write_line(self, line: str) -> None:
        if not line.startswith((RESULT_MARKER, ERROR_MARKER)):
            self._log_sink.write_line(line)
            return

        try:
            if line.startswith(RESULT_MARKER):
                result = ExecutionResult.from_dict(json.loads(line[len(RESULT_MARKER):]))
                with self._lock:
                    self._result = result
            else:
                error = decode_error(json.loads(line[len(ERROR_MARKER):]))
                with self._lock:
                    self._error = error
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            with self._lock:
                self._error = RemoteExecutionError(f"Malformed agent marker line {line!r}: {e}")

    def outcome(self, channel_exit_code: int) -> ExecutionResult:
        """Return the agent's result or raise the agent's error.

        Raises:
            NucleiRunnerError: Reported by the agent.
            RemoteExecutionError: If no marker line was received.
        """
        with self._lock:
            if self._error is not None:
                raise self._error
            if self._result is not None:
                return self._result
        raise RemoteExecutionError(
            f"Remote agent exited with code {channel_exit_code} without reporting a result"
        )
