"""
Logging configuration for x402-exec
"""

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "x402_exec"
LOG_LEVEL_ENV = "X402_EXEC_LOG_LEVEL"


def setup_logging(level: int | str | None = None, stream: IO[str] | None = None) -> logging.Logger:
    """
    Attach a console handler to the package logger.

    Only the ``x402_exec`` logger is touched, so applications embedding the SDK
    keep control of the root logger.

    Args:
        level: Logging level name or number. Falls back to the
            ``X402_EXEC_LOG_LEVEL`` environment variable, then INFO.
        stream: Output stream (default: stdout)

    Returns:
        The configured package logger
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(levelname)-8s %(name)s %(filename)s:%(lineno)d %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name"""
    return logging.getLogger(name)
