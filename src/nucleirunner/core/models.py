"""Core data models for nuclei-runner.

These are created fresh for every execution and thrown away afterwards.
ExecutionSpec and ExecutionResult also travel over remote channels, so
they convert to and from plain JSON-compatible dictionaries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from nucleirunner.bootstrap.platform import Platform

# Exit code reported when the process never started (shell convention).
EXIT_LAUNCH_FAILURE = 127


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of running a subprocess.

    Attributes:
        exit_code: Process exit code (EXIT_LAUNCH_FAILURE if it never started).
        reached_subprocess: False when the process could not be launched.
        error: Launch error message, if any.
    """

    exit_code: int
    reached_subprocess: bool
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.reached_subprocess and self.exit_code == 0

    @classmethod
    def launch_failure(cls, error: str) -> "ExecutionResult":
        return cls(exit_code=EXIT_LAUNCH_FAILURE, reached_subprocess=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "exit_code": self.exit_code,
            "reached_subprocess": self.reached_subprocess,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExecutionResult":
        return cls(
            exit_code=int(data["exit_code"]),
            reached_subprocess=bool(data["reached_subprocess"]),
            error=data.get("error"),
        )


@dataclass(frozen=True)
class BinaryHandle:
    """A provisioned scanner binary inside a working directory."""

    path: str
    platform: Platform
    version: str


@dataclass
class ExecutionSpec:
    """Everything needed to provision and run one scan.

    The same structure drives local execution and is shipped verbatim to
    a remote agent, which runs it with its own local executor.

    Attributes:
        platform: Platform the binary is provisioned for.
        target: URL to scan.
        run_id: Identifier used in the output file name.
        nuclei_version: Pinned scanner version.
        extra_flags: Whitespace-delimited extra scanner flags.
        reporting_config: Issue tracker configuration text.
        verify_checksums: Whether to verify the release archive checksum.
    """

    platform: Platform
    target: str
    run_id: str
    nuclei_version: str
    extra_flags: Optional[str] = None
    reporting_config: Optional[str] = None
    verify_checksums: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "platform": self.platform.value,
            "target": self.target,
            "run_id": self.run_id,
            "nuclei_version": self.nuclei_version,
            "extra_flags": self.extra_flags,
            "reporting_config": self.reporting_config,
            "verify_checksums": self.verify_checksums,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExecutionSpec":
        """Create from dictionary (e.g., from JSON).

        Raises:
            KeyError: If a required field is missing.
            ValueError: If the platform value is unknown.
        """
        return cls(
            platform=Platform(data["platform"]),
            target=data["target"],
            run_id=str(data["run_id"]),
            nuclei_version=data["nuclei_version"],
            extra_flags=data.get("extra_flags"),
            reporting_config=data.get("reporting_config"),
            verify_checksums=data.get("verify_checksums", True),
        )
