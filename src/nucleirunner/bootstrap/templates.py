"""Nuclei template refresh.

Runs the provisioned binary in template-update mode. Update failures are
not fatal: a previous run may have left usable templates behind, and an
unreachable update server should not block scanning.
"""

from __future__ import annotations

import os
from typing import Optional

from nucleirunner.bootstrap.paths import TEMPLATES_DIR_NAME
from nucleirunner.core.errors import TemplateRefreshWarning
from nucleirunner.core.logging import get_logger
from nucleirunner.core.models import BinaryHandle
from nucleirunner.core.streaming import LogSink
from nucleirunner.core.subprocess_runner import ProcessRunner
from nucleirunner.core.workspace import WorkingDirectory

LOGGER = get_logger(__name__)


class TemplateProvisioner:
    """Populates or refreshes the templates directory of a working directory."""

    def __init__(self, runner: Optional[ProcessRunner] = None) -> None:
        self._runner = runner or ProcessRunner()

    def refresh(
        self,
        binary: BinaryHandle,
        working_dir: WorkingDirectory,
        log_sink: LogSink,
    ) -> str:
        """Update templates into {workdir}/nuclei-templates.

        Returns:
            Path of the templates directory, whether or not the update worked.
        """
        templates_path = working_dir.resolve(TEMPLATES_DIR_NAME)
        argv = [
            binary.path,
            "-update-template-dir", templates_path,
            "-update-templates",
            "-no-color",
        ]

        result = self._runner.run(argv, log_sink, cwd=working_dir.path)

        if not result.reached_subprocess:
            self._warn(log_sink, f"Template update could not start: {result.error}")
        elif result.exit_code != 0:
            self._warn(
                log_sink,
                f"Template update exited with code {result.exit_code}, "
                "continuing with cached templates",
            )
        elif not _is_populated(templates_path):
            self._warn(log_sink, f"Template directory {templates_path} is empty after update")
        else:
            LOGGER.debug(f"Templates refreshed in {templates_path}")

        return templates_path

    def _warn(self, log_sink: LogSink, message: str) -> None:
        LOGGER.warning(f"{TemplateRefreshWarning.__name__}: {message}")
        log_sink.write_line(f"WARNING: {message}")


def _is_populated(path: str) -> bool:
    if not os.path.isdir(path):
        return False
    with os.scandir(path) as entries:
        return any(entries)
