"""Status command implementation."""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import TYPE_CHECKING

from nucleirunner.bootstrap.paths import get_nuclei_runner_home
from nucleirunner.bootstrap.platform import host_identity, resolve_platform
from nucleirunner.bootstrap.provisioner import BinaryProvisioner
from nucleirunner.bootstrap.validation import validate_tool
from nucleirunner.cli.commands import Command
from nucleirunner.cli.exit_codes import EXIT_BOOTSTRAP_FAILURE, EXIT_SUCCESS
from nucleirunner.core.errors import UnsupportedPlatformError
from nucleirunner.core.workspace import LocalWorkingDirectory

if TYPE_CHECKING:
    from nucleirunner.config.models import RunnerConfig


class StatusCommand(Command):
    """Shows platform, pinned nuclei version and binary status."""

    def __init__(self, version: str):
        """Initialize StatusCommand.

        Args:
            version: Current nuclei-runner version string.
        """
        self._version = version

    @property
    def name(self) -> str:
        """Command identifier."""
        return "status"

    def execute(self, args: Namespace, config: "RunnerConfig | None" = None) -> int:
        """Execute the status command.

        Returns:
            0, or 4 if this platform has no nuclei release.
        """
        os_name, machine = host_identity()
        nuclei_version = config.nuclei_version if config else BinaryProvisioner().version
        workdir = Path(getattr(args, "workdir", None) or Path.cwd())

        print(f"nuclei-runner version: {self._version}")
        print(f"Host: {os_name} {machine}")
        print(f"Pinned nuclei version: {nuclei_version}")
        print(f"Global config home: {get_nuclei_runner_home()}")
        if config and config.sources:
            print(f"Config sources: {', '.join(config.sources)}")

        try:
            platform = resolve_platform(os_name, machine)
        except UnsupportedPlatformError as e:
            print(f"Platform: unsupported ({e})")
            return EXIT_BOOTSTRAP_FAILURE

        binary_path = BinaryProvisioner(version=nuclei_version).binary_path(
            LocalWorkingDirectory(workdir), platform
        )
        print(f"Platform: {platform.value}")
        print(f"Binary: {binary_path} ({validate_tool(binary_path).value})")
        return EXIT_SUCCESS
