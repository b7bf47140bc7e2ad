"""Logging setup shared by every gotestreport module."""

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "gotestreport"

_ROOT_LOGGER_CONFIGURED = False


def setup_root_logger(
    level: int = logging.WARNING,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach a single handler to the ``gotestreport`` logger.

    Calling it again is a no-op until :func:`reset_logging` runs.

    Args:
        level: Logging level (default: WARNING).
        format_string: Custom format string (optional).
        handler: Custom handler (optional, defaults to a stderr StreamHandler).
    """
    global _ROOT_LOGGER_CONFIGURED

    if _ROOT_LOGGER_CONFIGURED:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # stdout carries the rendered summary
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(logging.Formatter(format_string))
    root_logger.addHandler(handler)

    # Let logs propagate so pytest can capture them
    root_logger.propagate = True

    _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger that inherits the ``gotestreport`` configuration.

    Args:
        name: Logger name, normally ``__name__`` of the calling module.
    """
    setup_root_logger()

    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the log level for all gotestreport loggers and their handlers."""
    setup_root_logger()

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)

    for handler in root_logger.handlers:
        handler.setLevel(level)


def reset_logging() -> None:
    """Reset logging configuration (mainly for testing)."""
    global _ROOT_LOGGER_CONFIGURED
    _ROOT_LOGGER_CONFIGURED = False

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
