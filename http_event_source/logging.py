"""Logging configuration for the HTTP event source."""

import logging
import sys

PACKAGE_LOGGER = "http_event_source"


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Configure logging for this package.

    Only the package logger is touched; the root logger belongs to the host.

    Args:
        level: Logging level (default: INFO)
    """
    format_string = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"

    if isinstance(level, str):
        level = level.upper()

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter(format_string, datefmt="%Y-%m-%d %H:%M:%S")
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)
    package_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
