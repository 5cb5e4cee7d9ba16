"""CLI commands package.

This module provides the base Command class and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nucleirunner.config.models import RunnerConfig


class Command(ABC):
    """Base class for CLI commands.

    All CLI commands should inherit from this class and implement
    the execute method.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier."""

    @abstractmethod
    def execute(self, args: Namespace, config: "RunnerConfig | None" = None) -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.
            config: Optional loaded configuration.

        Returns:
            Exit code (0 for success, non-zero for error).
        """


# Import command implementations for convenience
# ruff: noqa: E402
from nucleirunner.cli.commands.agent import AgentCommand
from nucleirunner.cli.commands.scan import ScanCommand
from nucleirunner.cli.commands.status import StatusCommand
from nucleirunner.cli.commands.validate import ValidateCommand

__all__ = [
    "Command",
    "AgentCommand",
    "ScanCommand",
    "StatusCommand",
    "ValidateCommand",
]
