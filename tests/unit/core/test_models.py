"""Tests for core data models."""

from __future__ import annotations

import pytest

from nucleirunner.bootstrap.platform import Platform
from nucleirunner.core.models import EXIT_LAUNCH_FAILURE, ExecutionResult, ExecutionSpec


class TestExecutionResult:
    """Tests for ExecutionResult."""

    def test_success(self) -> None:
        assert ExecutionResult(exit_code=0, reached_subprocess=True).success

    def test_nonzero_exit_is_not_success(self) -> None:
        assert not ExecutionResult(exit_code=1, reached_subprocess=True).success

    def test_launch_failure(self) -> None:
        result = ExecutionResult.launch_failure("no such file")
        assert result.exit_code == EXIT_LAUNCH_FAILURE
        assert result.reached_subprocess is False
        assert result.error == "no such file"
        assert not result.success

    def test_from_dict(self) -> None:
        result = ExecutionResult.from_dict({"exit_code": "2", "reached_subprocess": 1})
        assert result == ExecutionResult(exit_code=2, reached_subprocess=True, error=None)


class TestExecutionSpec:
    """Tests for ExecutionSpec serialization."""

    def test_to_dict_uses_platform_value(self) -> None:
        spec = ExecutionSpec(
            platform=Platform.DARWIN_ARM64,
            target="https://app.example",
            run_id="7",
            nuclei_version="3.3.9",
        )
        data = spec.to_dict()
        assert data["platform"] == "darwin-arm64"
        assert data["extra_flags"] is None
        assert data["verify_checksums"] is True

    def test_from_dict_with_defaults(self) -> None:
        spec = ExecutionSpec.from_dict({
            "platform": "linux-amd64",
            "target": "https://app.example",
            "run_id": 12,
            "nuclei_version": "3.3.9",
        })
        assert spec.platform is Platform.LINUX_AMD64
        assert spec.run_id == "12"
        assert spec.reporting_config is None
        assert spec.verify_checksums is True

    def test_from_dict_unknown_platform(self) -> None:
        with pytest.raises(ValueError):
            ExecutionSpec.from_dict({
                "platform": "plan9-mips",
                "target": "x",
                "run_id": "1",
                "nuclei_version": "3.3.9",
            })

    def test_from_dict_missing_field(self) -> None:
        with pytest.raises(KeyError):
            ExecutionSpec.from_dict({"platform": "linux-amd64"})
