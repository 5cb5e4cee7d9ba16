"""Tests for the agent wire format."""

from __future__ import annotations

from typing import List

import pytest

from nucleirunner.core.errors import ProvisioningError, RemoteExecutionError
from nucleirunner.core.models import ExecutionResult
from nucleirunner.remote.channel import (
    ERROR_MARKER,
    RESULT_MARKER,
    AgentOutputSink,
    decode_error,
    encode_error,
    encode_result,
)


class TestMarkers:
    """Tests for marker encoding."""

    def test_encode_result(self) -> None:
        line = encode_result(ExecutionResult(exit_code=1, reached_subprocess=True))
        assert line.startswith(RESULT_MARKER)
        assert '"exit_code": 1' in line

    def test_error_type_survives(self) -> None:
        line = encode_error(ProvisioningError("Checksum mismatch"))
        assert line.startswith(ERROR_MARKER)

        sink = AgentOutputSink(log_sink=_Collector())
        sink.write_line(line)
        with pytest.raises(ProvisioningError, match="Checksum mismatch"):
            sink.outcome(0)

    def test_unknown_error_type(self) -> None:
        error = decode_error({"type": "KeyError", "message": "boom"})
        assert type(error) is RemoteExecutionError
        assert str(error) == "boom"


class _Collector:
    def __init__(self) -> None:
        self.lines: List[str] = []

    def write_line(self, line: str) -> None:
        self.lines.append(line)


class TestAgentOutputSink:
    """Tests for AgentOutputSink."""

    def test_forwards_output_and_keeps_result(self) -> None:
        collector = _Collector()
        sink = AgentOutputSink(collector)

        sink.write_line("Using nuclei binary: /srv/work/nuclei")
        sink.write_line("[critical] finding")
        sink.write_line(encode_result(ExecutionResult(exit_code=1, reached_subprocess=True)))

        assert collector.lines == ["Using nuclei binary: /srv/work/nuclei", "[critical] finding"]
        assert sink.outcome(0) == ExecutionResult(exit_code=1, reached_subprocess=True)

    def test_missing_marker(self) -> None:
        sink = AgentOutputSink(_Collector())
        sink.write_line("bash: nuclei-runner: command not found")
        with pytest.raises(RemoteExecutionError, match="exited with code 127"):
            sink.outcome(127)

    def test_malformed_marker(self) -> None:
        sink = AgentOutputSink(_Collector())
        sink.write_line(RESULT_MARKER + "{not json")
        with pytest.raises(RemoteExecutionError, match="Malformed agent marker"):
            sink.outcome(0)
