"""Subprocess runner with live output streaming.

Runs external tools and forwards their stdout and stderr to a LogSink
line by line while the process is running.
"""

from __future__ import annotations

import queue
import subprocess
import threading
from pathlib import Path
from typing import IO, List, Optional, Sequence, Union

from nucleirunner.core.errors import ExecutionCancelled
from nucleirunner.core.logging import get_logger
from nucleirunner.core.models import ExecutionResult
from nucleirunner.core.streaming import LogSink, StreamType

LOGGER = get_logger(__name__)

# Seconds between cancellation checks while waiting for output.
POLL_INTERVAL = 0.2

# Seconds to wait after terminate() before kill().
TERMINATE_GRACE_PERIOD = 5.0


class ProcessRunner:
    """Launches a subprocess and streams its output to a log sink.

    There is no internal timeout: the process runs until it exits or the
    optional cancel event is set.
    """

    def __init__(self, cancel_event: Optional[threading.Event] = None) -> None:
        """Initialize ProcessRunner.

        Args:
            cancel_event: When set, the running process is terminated and
                ExecutionCancelled is raised.
        """
        self._cancel_event = cancel_event

    def run(
        self,
        argv: Sequence[str],
        log_sink: LogSink,
        cwd: Optional[Union[str, Path]] = None,
        stdin_data: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ExecutionResult:
        """Run a command, streaming combined output to `log_sink`.

        Args:
            argv: Executable followed by its arguments.
            log_sink: Receives every output line as it is produced.
            cwd: Working directory for the process.
            stdin_data: Text written to the process's stdin, which is then
                closed. Stdin is not connected when None.
            cancel_event: Replaces the runner's own cancel event for this call.

        Returns:
            ExecutionResult with the exit code. reached_subprocess is False
            when the process could not be launched.

        Raises:
            ExecutionCancelled: If the cancel event was set.
        """
        cancel_event = cancel_event if cancel_event is not None else self._cancel_event
        cmd = [str(arg) for arg in argv]
        LOGGER.debug(f"Running: {' '.join(cmd)}")

        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.PIPE if stdin_data is not None else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                cwd=str(cwd) if cwd is not None else None,
            )
        except OSError as e:
            LOGGER.debug(f"Failed to launch {cmd[0]}: {e}")
            return ExecutionResult.launch_failure(f"Failed to launch {cmd[0]}: {e}")

        with proc:
            output_queue: queue.Queue = queue.Queue()
            threads: List[threading.Thread] = [
                threading.Thread(
                    target=_read_stream,
                    args=(proc.stdout, StreamType.STDOUT, output_queue),
                    daemon=True,
                ),
                threading.Thread(
                    target=_read_stream,
                    args=(proc.stderr, StreamType.STDERR, output_queue),
                    daemon=True,
                ),
            ]
            if stdin_data is not None:
                threads.append(
                    threading.Thread(
                        target=_write_stdin,
                        args=(proc.stdin, stdin_data),
                        daemon=True,
                    )
                )
            for thread in threads:
                thread.start()

            try:
                _pump(output_queue, log_sink, cancel_event)
            except (ExecutionCancelled, KeyboardInterrupt):
                _terminate(proc)
                raise

            for thread in threads:
                thread.join(timeout=1)
            returncode = proc.wait()

        LOGGER.debug(f"{cmd[0]} exited with code {returncode}")
        return ExecutionResult(exit_code=returncode, reached_subprocess=True)


def _pump(
    output_queue: queue.Queue,
    log_sink: LogSink,
    cancel_event: Optional[threading.Event],
) -> None:
    """Forward queued lines until both output streams hit EOF."""
    streams_closed = 0
    while streams_closed < 2:
        if cancel_event is not None and cancel_event.is_set():
            raise ExecutionCancelled("Execution cancelled by caller")
        try:
            _stream_type, line = output_queue.get(timeout=POLL_INTERVAL)
        except queue.Empty:
            continue
        if line is None:
            streams_closed += 1
        else:
            log_sink.write_line(line)


def _read_stream(stream: IO[str], stream_type: StreamType, output_queue: queue.Queue) -> None:
    """Read lines from a stream and put them in the queue."""
    try:
        for line in stream:
            output_queue.put((stream_type, line.rstrip("\r\n")))
    except ValueError:
        # Stream closed underneath us after the process was terminated.
        pass
    finally:
        # Signal EOF for this stream
        output_queue.put((stream_type, None))


def _write_stdin(stream: IO[str], data: str) -> None:
    try:
        stream.write(data)
    except BrokenPipeError:
        LOGGER.debug("Process closed stdin before all input was written")
    finally:
        try:
            stream.close()
        except BrokenPipeError:
            pass


def _terminate(proc: subprocess.Popen) -> None:
    """Stop a running process: terminate first, kill if it lingers."""
    if proc.poll() is not None:
        return
    LOGGER.info(f"Terminating process {proc.pid}")
    proc.terminate()
    try:
        proc.wait(timeout=TERMINATE_GRACE_PERIOD)
    except subprocess.TimeoutExpired:
        LOGGER.warning(f"Process {proc.pid} did not terminate, killing it")
        proc.kill()
        proc.wait()
