"""Agent command implementation (remote side of `scan --remote-host`)."""

from __future__ import annotations

import sys
from argparse import Namespace
from pathlib import Path
from typing import TYPE_CHECKING, Optional, TextIO

from nucleirunner.cli.commands import Command
from nucleirunner.cli.exit_codes import EXIT_SCANNER_ERROR, EXIT_SUCCESS
from nucleirunner.remote.agent import run_agent

if TYPE_CHECKING:
    from nucleirunner.config.models import RunnerConfig


class AgentCommand(Command):
    """Runs one execution spec received on stdin."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self._stdin = stdin
        self._stdout = stdout

    @property
    def name(self) -> str:
        """Command identifier."""
        return "agent"

    def execute(self, args: Namespace, config: "RunnerConfig | None" = None) -> int:
        """Execute the agent command.

        Returns:
            0 when a result was reported (whatever nuclei's exit code), 2 otherwise.
        """
        workdir = Path(args.workdir)
        workdir.mkdir(parents=True, exist_ok=True)
        reported = run_agent(
            self._stdin or sys.stdin,
            self._stdout or sys.stdout,
            workdir,
        )
        return EXIT_SUCCESS if reported else EXIT_SCANNER_ERROR
