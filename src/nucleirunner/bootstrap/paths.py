"""Path management for working directories and the global home.

Everything one execution creates lives under the working directory:

    <workdir>/
        .nuclei-runner/
            bin/nuclei/{version}/nuclei   - Provisioned scanner binary
            tmp/                          - Download staging area
        nuclei-templates/                 - Scan templates
        nucleiOutput-{run_id}.txt         - Scan output
        reporting_config.yml              - Issue tracker configuration

The global home (~/.nuclei-runner) only holds configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".nuclei-runner"

# Environment variable to override home directory
NUCLEI_RUNNER_HOME_ENV = "NUCLEI_RUNNER_HOME"

TEMPLATES_DIR_NAME = "nuclei-templates"
REPORT_CONFIG_FILE_NAME = "reporting_config.yml"


def get_nuclei_runner_home() -> Path:
    """Get the nuclei-runner home directory path.

    Resolution order:
    1. NUCLEI_RUNNER_HOME environment variable (if set)
    2. ~/.nuclei-runner (default)
    """
    env_home = os.environ.get(NUCLEI_RUNNER_HOME_ENV)
    if env_home:
        return Path(env_home)
    return Path.home() / DEFAULT_HOME_DIR_NAME


def output_file_name(run_id: str) -> str:
    """Name of the scan output file for a run."""
    return f"nucleiOutput-{run_id}.txt"


@dataclass
class WorkspacePaths:
    """Resolves the artifact layout inside a local working directory."""

    root: Path

    _STATE_DIR: ClassVar[str] = DEFAULT_HOME_DIR_NAME
    _BIN_DIR: ClassVar[str] = "bin"
    _TMP_DIR: ClassVar[str] = "tmp"

    @property
    def state_dir(self) -> Path:
        return self.root / self._STATE_DIR

    @property
    def bin_dir(self) -> Path:
        """Directory containing provisioned binaries."""
        return self.state_dir / self._BIN_DIR

    @property
    def tmp_dir(self) -> Path:
        """Staging area for downloads; safe to delete between runs."""
        return self.state_dir / self._TMP_DIR

    def tool_bin_dir(self, tool_name: str, version: str) -> Path:
        """Get the binary directory for a specific tool version.

        Args:
            tool_name: Name of the tool (nuclei).
            version: Version string.

        Returns:
            Path to the tool's version-specific binary directory.
        """
        return self.bin_dir / tool_name / version
