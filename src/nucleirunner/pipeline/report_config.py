"""Issue tracker / reporting configuration file handling."""

from __future__ import annotations

from typing import List, Optional

from nucleirunner.bootstrap.paths import REPORT_CONFIG_FILE_NAME
from nucleirunner.core.errors import ConfigWriteError
from nucleirunner.core.logging import get_logger
from nucleirunner.core.workspace import LocalWorkingDirectory

LOGGER = get_logger(__name__)


def write_reporting_config(
    working_dir: LocalWorkingDirectory, content: Optional[str]
) -> Optional[str]:
    """Write the reporting configuration verbatim into the working directory.

    Args:
        working_dir: Directory receiving reporting_config.yml.
        content: Configuration text. Nothing is written when empty or None.

    Returns:
        Path of the written file, or None if there was no content.

    Raises:
        ConfigWriteError: If the file cannot be written.
    """
    if not content:
        return None

    path = working_dir.resolve(REPORT_CONFIG_FILE_NAME)
    try:
        working_dir.write_text(path, content)
    except OSError as e:
        raise ConfigWriteError(
            f"Error while writing the reporting/issue tracking configuration to '{path}': {e}"
        ) from e

    LOGGER.debug(f"Reporting configuration written to {path}")
    return path


def report_config_arguments(path: Optional[str]) -> List[str]:
    """CLI arguments pointing nuclei at a reporting configuration file."""
    if path is None:
        return []
    return ["-report-config", path]
