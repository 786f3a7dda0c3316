"""
Tests for core.logging module.
"""

import logging
from unittest.mock import patch


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_level_name_accepted(self):
        from reaper.core.logging import setup_logging

        with patch("logging.basicConfig") as basic_config:
            setup_logging("debug")

        assert basic_config.call_args.kwargs["level"] == logging.DEBUG

    def test_unknown_level_name_falls_back_to_info(self):
        from reaper.core.logging import setup_logging

        with patch("logging.basicConfig") as basic_config:
            setup_logging("chatty")

        assert basic_config.call_args.kwargs["level"] == logging.INFO

    def test_http_client_loggers_quietened(self):
        from reaper.core.logging import setup_logging

        with patch("logging.basicConfig"):
            setup_logging(logging.DEBUG)

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING


def test_get_logger_is_named():
    from reaper.core.logging import get_logger

    assert get_logger("reaper.services.travis").name == "reaper.services.travis"
