"""Validate command implementation.

Validates nuclei-runner configuration files and reports issues.
"""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import TYPE_CHECKING

from nucleirunner.cli.commands import Command
from nucleirunner.cli.exit_codes import EXIT_ISSUES_FOUND, EXIT_INVALID_USAGE, EXIT_SUCCESS
from nucleirunner.config.loader import PROJECT_CONFIG_NAMES, find_project_config
from nucleirunner.config.validation import (
    ConfigValidationIssue,
    ValidationSeverity,
    validate_config_file,
)

if TYPE_CHECKING:
    from nucleirunner.config.models import RunnerConfig


class ValidateCommand(Command):
    """Validates nuclei-runner configuration files."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "validate"

    def execute(self, args: Namespace, config: "RunnerConfig | None" = None) -> int:
        """Execute the validate command.

        Returns:
            Exit code: 0 = valid, 1 = has errors, 3 = file not found.
        """
        config_path = getattr(args, "config", None)
        if config_path:
            config_path = Path(config_path)
        else:
            config_path = find_project_config(Path.cwd())

        if config_path is None:
            print("No configuration file found.")
            print(f"Looked for: {', '.join(PROJECT_CONFIG_NAMES)}")
            return EXIT_INVALID_USAGE

        if not config_path.exists():
            print(f"Configuration file not found: {config_path}")
            return EXIT_INVALID_USAGE

        print(f"Validating {config_path}...")

        is_valid, issues = validate_config_file(config_path)

        if not issues:
            print("Configuration is valid.")
            return EXIT_SUCCESS

        errors = [i for i in issues if i.severity == ValidationSeverity.ERROR]
        warnings = [i for i in issues if i.severity == ValidationSeverity.WARNING]

        if errors:
            print(f"\nErrors ({len(errors)}):")
            for issue in errors:
                self._print_issue(issue)

        if warnings:
            print(f"\nWarnings ({len(warnings)}):")
            for issue in warnings:
                self._print_issue(issue)

        if is_valid:
            print("\nConfiguration is valid (with warnings).")
            return EXIT_SUCCESS

        print("\nConfiguration has errors.")
        return EXIT_ISSUES_FOUND

    def _print_issue(self, issue: ConfigValidationIssue) -> None:
        line = f"  - {issue.message}"
        if issue.suggestion:
            line += f" (did you mean '{issue.suggestion}'?)"
        print(line)
