"""Log sink abstraction for live scanner output.

A log sink is where the pipeline step's build log goes. Scanner output
is written to it line by line while the process runs:
- Console: print to a text stream with optional Rich formatting
- Callback: forward each line to a callable (e.g. a pipeline API)
- Null: discard everything
"""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional, TextIO

from rich.console import Console
from rich.markup import escape


class StreamType(str, Enum):
    """Origin of a streamed line."""

    STDOUT = "stdout"
    STDERR = "stderr"


class LogSink(ABC):
    """Abstract base class for log sinks.

    Implementations must be thread-safe: stdout and stderr of a process
    are read on separate threads.
    """

    @abstractmethod
    def write_line(self, line: str) -> None:
        """Write one line (without trailing newline) to the log."""


class NullLogSink(LogSink):
    """Discards all output."""

    def write_line(self, line: str) -> None:
        pass


class ConsoleLogSink(LogSink):
    """Thread-safe console sink.

    Writes plain lines to `output`, or through a Rich console when
    `use_rich` is set.
    """

    def __init__(
        self,
        output: Optional[TextIO] = None,
        use_rich: bool = False,
        prefix: str = "",
    ):
        """Initialize ConsoleLogSink.

        Args:
            output: Output stream to write to (default: stdout).
            use_rich: Whether to use Rich for formatted output.
            prefix: Text prepended to every line.
        """
        self._output = output or sys.stdout
        self._prefix = prefix
        self._lock = threading.Lock()
        self._console: Optional[Console] = None

        if use_rich:
            self._console = Console(file=self._output, highlight=False)

    def write_line(self, line: str) -> None:
        with self._lock:
            if self._console is not None:
                self._console.print(f"[dim]{escape(self._prefix)}[/dim]{escape(line)}")
            else:
                print(f"{self._prefix}{line}", file=self._output, flush=True)


class CallbackLogSink(LogSink):
    """Forwards every line to a callback, serialized by a lock."""

    def __init__(self, on_line: Callable[[str], None]):
        self._on_line = on_line
        self._lock = threading.Lock()

    def write_line(self, line: str) -> None:
        with self._lock:
            self._on_line(line)
