"""Agent side of remote execution.

Reads one ExecutionSpec as JSON from stdin, runs it with a LocalExecutor
in the given working directory and streams the output to stdout, ending
with a single result or error marker line.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, TextIO

from nucleirunner.core.errors import NucleiRunnerError, RemoteExecutionError
from nucleirunner.core.logging import get_logger
from nucleirunner.core.models import ExecutionSpec
from nucleirunner.core.streaming import ConsoleLogSink
from nucleirunner.core.subprocess_runner import ProcessRunner
from nucleirunner.core.workspace import LocalWorkingDirectory
from nucleirunner.pipeline.executor import LocalExecutor
from nucleirunner.remote.channel import encode_error, encode_result

LOGGER = get_logger(__name__)


def read_spec(stdin: TextIO) -> ExecutionSpec:
    """Parse the ExecutionSpec sent by the dispatching host.

    Raises:
        RemoteExecutionError: If the input is not a valid spec.
    """
    raw = stdin.readline()
    try:
        return ExecutionSpec.from_dict(json.loads(raw))
    except (ValueError, KeyError, TypeError) as e:
        raise RemoteExecutionError(f"Invalid execution spec received: {e}") from e


def run_agent(
    stdin: TextIO,
    stdout: TextIO,
    workdir: Path,
    runner: Optional[ProcessRunner] = None,
) -> bool:
    """Execute one spec and report the outcome on stdout.

    Returns:
        True if a result marker was written, False if an error marker was.
    """
    sink = ConsoleLogSink(output=stdout)
    try:
        spec = read_spec(stdin)
        LOGGER.info(f"Agent running scan of {spec.target} in {workdir}")
        executor = LocalExecutor(LocalWorkingDirectory(workdir), runner=runner)
        result = executor.provision_and_run(spec, sink)
    except NucleiRunnerError as e:
        LOGGER.error(f"Agent execution failed: {e}")
        sink.write_line(encode_error(e))
        return False

    sink.write_line(encode_result(result))
    return True
