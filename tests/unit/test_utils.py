"""Unit tests for logging helpers."""

import logging
from unittest.mock import patch

import pytest

from ragbot.utils import LOG_FORMAT, configure_logging, log_timing, log_with_prefix, resolve_level


@pytest.mark.parametrize(
    "name, expected",
    [("DEBUG", logging.DEBUG), ("info", logging.INFO), ("Error", logging.ERROR), ("verbose", logging.WARNING), ("", logging.WARNING)],
)
def test_resolve_level(name, expected):
    assert resolve_level(name) == expected


@patch("ragbot.utils.logging.basicConfig")
def test_configure_logging_uses_level_and_format(mock_basic_config):
    configure_logging("debug")
    mock_basic_config.assert_called_once_with(level=logging.DEBUG, format=LOG_FORMAT)


@patch("ragbot.utils.logging.basicConfig")
def test_configure_logging_unknown_level_falls_back_to_warning(mock_basic_config):
    configure_logging("chatty")
    mock_basic_config.assert_called_once_with(level=logging.WARNING, format=LOG_FORMAT)


def test_log_with_prefix(caplog):
    """Test log_with_prefix adds prefix to message."""
    logger = logging.getLogger("ragbot.test")
    with caplog.at_level(logging.WARNING, logger="ragbot.test"):
        log_with_prefix(logger, logging.WARNING, "GeoResolver", "Missing API key")

    assert "[GeoResolver] Missing API key" in caplog.text


def test_log_timing_is_debug(caplog):
    import time

    logger = logging.getLogger("ragbot.test")
    with caplog.at_level(logging.DEBUG, logger="ragbot.test"):
        log_timing(logger, "ChatSession", time.time() - 0.25, "Answered")

    record = caplog.records[-1]
    assert record.levelno == logging.DEBUG
    assert record.getMessage().startswith("[ChatSession] Answered in 0.")
    assert record.getMessage().endswith("s")
