"""Logging configuration and setup utilities.

Every module obtains its logger through ``setup_logger(__name__)``. Console
output is kept quiet (warnings and errors only) unless verbose mode is
requested, while an optional file handler captures the detailed trace of an
enhancement run (rate-limit waits, per-segment timings, provider failures).
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

# Public API
__all__ = [
    "setup_logger",
    "setup_file_handler",
    "configure_verbosity",
]

# Constants
DEFAULT_LOG_LEVEL = logging.INFO
USER_LOG_LEVEL = logging.WARNING
DETAILED_FORMAT = "[%(levelname)s] %(asctime)s - %(name)s - %(message)s"
SIMPLE_FORMAT = "[%(levelname)s] %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers created through setup_logger, so verbosity can be changed globally
_MANAGED_LOGGERS: dict[str, logging.Logger] = {}


def setup_logger(
    name: str,
    level: int = DEFAULT_LOG_LEVEL,
    date_format: Optional[str] = None,
    verbose: bool = False,
) -> logging.Logger:
    """
    Create or retrieve a logger with the application's standard console handler.

    Args:
        name: Logger name (typically ``__name__`` of the calling module)
        level: Level of the logger itself (file handlers see everything at this level)
        date_format: Custom date format for timestamps
        verbose: If True, the console shows ``level`` and above; otherwise warnings only

    Returns:
        Configured Logger instance

    Example:
        >>> logger = setup_logger(__name__)
        >>> logger.info("Segment 2/3 enhanced in 1.4s")  # file/verbose only
        >>> logger.warning("Rate limit reached")          # always shown
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level if verbose else USER_LOG_LEVEL)
        console_handler.setFormatter(
            logging.Formatter(fmt=SIMPLE_FORMAT, datefmt=date_format or DEFAULT_DATE_FORMAT)
        )
        logger.addHandler(console_handler)
        logger.setLevel(level)
        logger.propagate = False

    _MANAGED_LOGGERS[name] = logger
    return logger


def setup_file_handler(
    logger: Optional[logging.Logger],
    log_file_path: str,
    level: int = logging.DEBUG,
) -> logging.FileHandler:
    """
    Attach a file handler using the detailed format.

    Args:
        logger: Logger instance to modify; None attaches the handler to every
            logger created through ``setup_logger``
        log_file_path: Path of the log file (appended to)
        level: Level for file output

    Returns:
        The handler that was added, so callers can remove and close it again.
    """
    file_handler = logging.FileHandler(log_file_path, mode="a", encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter(fmt=DETAILED_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
    )
    targets = [logger] if logger is not None else list(_MANAGED_LOGGERS.values())
    for target in targets:
        target.addHandler(file_handler)
        if target.level > level:
            target.setLevel(level)
    return file_handler


def configure_verbosity(verbose: bool) -> None:
    """
    Switch console output of every managed logger between quiet and verbose.

    Quiet mode shows warnings and errors only; verbose mode shows INFO and up.
    File handlers are left untouched.
    """
    console_level = DEFAULT_LOG_LEVEL if verbose else USER_LOG_LEVEL
    for logger in _MANAGED_LOGGERS.values():
        for handler in logger.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(
                handler, logging.FileHandler
            ):
                handler.setLevel(console_level)
