"""Command line interface for nuclei-runner."""

from __future__ import annotations

from typing import Iterable, Optional


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Console script entry point."""
    from nucleirunner.cli.runner import CLIRunner

    return CLIRunner().run(argv)
