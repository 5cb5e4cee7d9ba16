"""Tests for logging setup."""

from __future__ import annotations

import io
import logging

from nucleirunner.core.logging import PACKAGE_LOGGER, configure_logging, get_logger


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_quiet_wins(self) -> None:
        configure_logging(debug=True, quiet=True, stream=io.StringIO())
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.ERROR

    def test_debug_over_verbose(self) -> None:
        configure_logging(debug=True, verbose=True, stream=io.StringIO())
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG

    def test_messages_reach_stream_once(self) -> None:
        first = io.StringIO()
        second = io.StringIO()
        configure_logging(verbose=True, stream=first)
        configure_logging(verbose=True, stream=second)

        get_logger("nucleirunner.tests").info("provisioning nuclei")

        assert first.getvalue() == ""
        assert second.getvalue().count("provisioning nuclei") == 1

    def test_default_logger_name(self) -> None:
        assert get_logger().name == PACKAGE_LOGGER
