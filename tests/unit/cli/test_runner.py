"""Tests for CLI runner."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from nucleirunner.bootstrap.paths import NUCLEI_RUNNER_HOME_ENV
from nucleirunner.cli import main
from nucleirunner.cli.exit_codes import (
    EXIT_BOOTSTRAP_FAILURE,
    EXIT_CANCELLED,
    EXIT_INVALID_USAGE,
    EXIT_SUCCESS,
)
from nucleirunner.cli.runner import CLIRunner, get_version, scan_overrides
from nucleirunner.config.loader import ConfigError


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(NUCLEI_RUNNER_HOME_ENV, str(tmp_path / "home"))


class TestGetVersion:
    """Tests for get_version function."""

    def test_get_version_from_metadata(self) -> None:
        """Test version retrieval from package metadata."""
        with patch("nucleirunner.cli.runner.version", return_value="1.2.3"):
            assert get_version() == "1.2.3"

    def test_get_version_fallback(self) -> None:
        """Test version fallback when metadata not available."""
        from importlib.metadata import PackageNotFoundError

        from nucleirunner import __version__

        with patch(
            "nucleirunner.cli.runner.version",
            side_effect=PackageNotFoundError("not found"),
        ):
            assert get_version() == __version__


class TestScanOverrides:
    """Tests for scan_overrides."""

    def _args(self, **overrides):
        args = CLIRunner().parser.parse_args(["scan"])
        for key, value in overrides.items():
            setattr(args, key, value)
        return args

    def test_unset_flags_are_none(self) -> None:
        overrides = scan_overrides(self._args())
        assert overrides["target"] is None
        assert overrides["verify_checksums"] is None
        assert overrides["remote"]["host"] is None

    def test_skip_checksum(self) -> None:
        assert scan_overrides(self._args(skip_checksum=True))["verify_checksums"] is False

    def test_reporting_config_file_is_read(self, tmp_path: Path) -> None:
        config_file = tmp_path / "jira.yml"
        config_file.write_text("issueTracker: jira\n")
        overrides = scan_overrides(self._args(reporting_config=str(config_file)))
        assert overrides["reporting_config"] == "issueTracker: jira\n"

    def test_missing_reporting_config_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read reporting configuration"):
            scan_overrides(self._args(reporting_config=str(tmp_path / "missing.yml")))


class TestCLIRunner:
    """Tests for CLIRunner class."""

    def test_initialization(self) -> None:
        """Test CLIRunner initialization."""
        runner = CLIRunner()
        assert runner.parser is not None
        assert runner.scan_cmd is not None
        assert runner.agent_cmd is not None
        assert runner.status_cmd is not None

    def test_run_version(self, capsys) -> None:
        """Test run with --version flag."""
        result = CLIRunner().run(["--version"])

        assert result == EXIT_SUCCESS
        assert capsys.readouterr().out.strip()

    def test_run_no_command(self, capsys) -> None:
        """Test run with no command shows help."""
        result = CLIRunner().run([])

        assert result == EXIT_SUCCESS
        assert "usage:" in capsys.readouterr().out.lower()

    def test_help_exits(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            CLIRunner().run(["--help"])
        assert exc_info.value.code == 0

    def test_scan_passes_merged_config(self, tmp_path: Path) -> None:
        """Test scan dispatch loads config and applies CLI overrides."""
        (tmp_path / ".nuclei-runner.yml").write_text(
            "target: https://file.example\nextra_flags: -severity critical\n"
        )
        runner = CLIRunner()
        runner.scan_cmd = MagicMock()
        runner.scan_cmd.execute.return_value = 1

        result = runner.run([
            "scan", "--workdir", str(tmp_path), "--target", "https://cli.example",
        ])

        assert result == 1
        config = runner.scan_cmd.execute.call_args[0][1]
        assert config.target == "https://cli.example"
        assert config.extra_flags == "-severity critical"

    def test_scan_with_bad_config(self, tmp_path: Path) -> None:
        """Test scan returns invalid usage when the config cannot be loaded."""
        runner = CLIRunner()
        runner.scan_cmd = MagicMock()

        result = runner.run([
            "scan", "--workdir", str(tmp_path), "--config", str(tmp_path / "missing.yml"),
        ])

        assert result == EXIT_INVALID_USAGE
        runner.scan_cmd.execute.assert_not_called()

    def test_keyboard_interrupt(self, tmp_path: Path) -> None:
        runner = CLIRunner()
        runner.scan_cmd = MagicMock()
        runner.scan_cmd.execute.side_effect = KeyboardInterrupt

        assert runner.run(["scan", "--workdir", str(tmp_path)]) == EXIT_CANCELLED

    def test_status(self, tmp_path: Path, capsys) -> None:
        """Test status prints platform information."""
        with patch(
            "nucleirunner.cli.commands.status.host_identity",
            return_value=("Linux", "x86_64"),
        ):
            result = CLIRunner().run(["status", "--workdir", str(tmp_path)])

        assert result == EXIT_SUCCESS
        output = capsys.readouterr().out
        assert "Platform: linux-amd64" in output
        assert "missing" in output

    def test_status_unsupported_platform(self, tmp_path: Path, capsys) -> None:
        with patch(
            "nucleirunner.cli.commands.status.host_identity",
            return_value=("Plan9", "mips"),
        ):
            result = CLIRunner().run(["status", "--workdir", str(tmp_path)])

        assert result == EXIT_BOOTSTRAP_FAILURE
        assert "unsupported" in capsys.readouterr().out

    def test_main_entry_point(self, capsys) -> None:
        assert main(["--version"]) == EXIT_SUCCESS
