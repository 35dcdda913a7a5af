"""Utility functions for the ragbot package."""

import logging
import time
from typing import Any


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(level: str) -> int:
    """Map a level name such as "debug" to its logging constant, WARNING if unknown."""
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.WARNING


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging once for CLI entry points.

    Args:
        level: Level name such as "DEBUG" or "INFO". Unknown names fall back to WARNING.
    """
    logging.basicConfig(level=resolve_level(level), format=LOG_FORMAT)


def log_with_prefix(logger: logging.Logger, level: int, prefix: str, message: str, *args: Any, **kwargs: Any) -> None:
    """Log a message with a prefix.

    Args:
        logger: The logger to use.
        level: The logging level (e.g., logging.DEBUG).
        prefix: The prefix to add to the message.
        message: The log message.
        *args: Additional arguments for the logger.
        **kwargs: Additional keyword arguments for the logger.
    """
    logger.log(level, f"[{prefix}] {message}", *args, **kwargs)


def log_timing(logger: logging.Logger, prefix: str, start_time: float, message: str, *args: Any, **kwargs: Any) -> None:
    """Log a timing message with elapsed time.

    Args:
        logger: The logger to use.
        prefix: The prefix for the log message.
        start_time: The start time (from time.time()).
        message: The base message to log.
        *args: Additional arguments for the logger.
        **kwargs: Additional keyword arguments for the logger.
    """
    elapsed = time.time() - start_time
    log_with_prefix(logger, logging.DEBUG, prefix, f"{message} in {elapsed:.2f}s", *args, **kwargs)
