"""Logging setup for nuclei-runner.

Diagnostics go through the ``nucleirunner`` package logger to stderr.
Stdout is reserved for scanner output and, in agent mode, the result
marker line read by the dispatching host.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "nucleirunner"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler: Optional[logging.Handler] = None


def _level_for(*, debug: bool, verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def configure_logging(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure the package logger from CLI flags.

    Precedence: quiet, then debug, then verbose, default WARNING. Calling
    it again replaces the previous handler instead of adding another.
    """
    global _handler

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_level_for(debug=debug, verbose=verbose, quiet=quiet))

    if _handler is not None:
        logger.removeHandler(_handler)
    _handler = logging.StreamHandler(stream or sys.stderr)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger under the package logger."""
    return logging.getLogger(name if name is not None else PACKAGE_LOGGER)
