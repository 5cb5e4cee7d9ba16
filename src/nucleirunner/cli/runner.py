"""CLI runner orchestration.

This module handles command dispatch and execution for the nuclei-runner CLI.
"""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from importlib.metadata import version, PackageNotFoundError

from nucleirunner.cli.arguments import build_parser
from nucleirunner.cli.commands.agent import AgentCommand
from nucleirunner.cli.commands.scan import ScanCommand
from nucleirunner.cli.commands.status import StatusCommand
from nucleirunner.cli.commands.validate import ValidateCommand
from nucleirunner.cli.exit_codes import EXIT_CANCELLED, EXIT_INVALID_USAGE, EXIT_SUCCESS
from nucleirunner.config import load_config
from nucleirunner.config.loader import ConfigError
from nucleirunner.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def get_version() -> str:
    """Get nuclei-runner version.

    Returns:
        Version string from package metadata or fallback.
    """
    try:
        return version("nuclei-runner")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from nucleirunner import __version__
        return __version__


def scan_overrides(args: Namespace) -> Dict[str, Any]:
    """Translate scan CLI flags into config overrides.

    Unset flags stay None and are dropped by the loader.

    Raises:
        ConfigError: If the reporting configuration file cannot be read.
    """
    reporting_config = None
    if args.reporting_config:
        try:
            reporting_config = Path(args.reporting_config).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(
                f"Cannot read reporting configuration {args.reporting_config}: {e}"
            ) from e

    return {
        "target": args.target,
        "extra_flags": args.extra_flags,
        "reporting_config": reporting_config,
        "workdir": args.workdir,
        "nuclei_version": args.nuclei_version,
        "verify_checksums": False if args.skip_checksum else None,
        "remote": {
            "host": args.remote_host,
            "user": args.remote_user,
            "port": args.remote_port,
            "key_path": args.remote_key,
            "workdir": args.remote_workdir,
            "agent_command": args.remote_agent,
        },
    }


class CLIRunner:
    """Orchestrates CLI execution with subcommand dispatch."""

    def __init__(self) -> None:
        """Initialize CLIRunner with parser and commands."""
        self.parser = build_parser()
        self._version = get_version()
        self.scan_cmd = ScanCommand(version=self._version)
        self.agent_cmd = AgentCommand()
        self.status_cmd = StatusCommand(version=self._version)
        self.validate_cmd = ValidateCommand()

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        argv_list = list(argv) if argv is not None else None
        args = self.parser.parse_args(argv_list)

        # Configure logging as early as possible
        configure_logging(
            debug=args.debug,
            verbose=args.verbose,
            quiet=args.quiet,
        )

        if args.version:
            print(self._version)
            return EXIT_SUCCESS

        command = getattr(args, "command", None)
        try:
            if command == "scan":
                return self._handle_scan(args)
            elif command == "agent":
                return self.agent_cmd.execute(args)
            elif command == "status":
                return self._handle_status(args)
            elif command == "validate":
                return self.validate_cmd.execute(args)
        except KeyboardInterrupt:
            LOGGER.error("Interrupted")
            return EXIT_CANCELLED

        self.parser.print_help()
        return EXIT_SUCCESS

    def _handle_scan(self, args: Namespace) -> int:
        project_root = Path(args.workdir) if args.workdir else Path.cwd()
        cli_config_path = Path(args.config) if args.config else None
        try:
            config = load_config(
                project_root=project_root,
                cli_config_path=cli_config_path,
                cli_overrides=scan_overrides(args),
            )
        except ConfigError as e:
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE
        return self.scan_cmd.execute(args, config)

    def _handle_status(self, args: Namespace) -> int:
        project_root = Path(args.workdir) if args.workdir else Path.cwd()
        try:
            config = load_config(project_root=project_root)
        except ConfigError as e:
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE
        return self.status_cmd.execute(args, config)
