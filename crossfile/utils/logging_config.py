"""
Logging setup shared by the engine, the CLI and the web service.

Every module asks for its logger through ``get_logger(__name__)``; names are
kept under the ``crossfile`` namespace so one call to ``setup_logging`` (or a
host application's own configuration) controls all of them.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional


DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
ROOT_LOGGER = "crossfile"

_loggers: dict[str, logging.Logger] = {}
_initialized = False


def setup_logging(
    level: int = logging.WARNING,
    log_file: Optional[Path] = None,
    format_string: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    force: bool = False,
) -> None:
    """
    Attach console (and optionally file) handlers to the ``crossfile`` logger.

    Args:
        level: Logging level for the package logger and its handlers
        log_file: Optional path of a log file to append to
        format_string: Log message format
        date_format: Date format for timestamps
        force: Re-run the setup even if it already happened (CLI level changes)
    """
    global _initialized

    root_logger = logging.getLogger(ROOT_LOGGER)
    if _initialized and not force:
        return
    if force:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)

    formatter = logging.Formatter(format_string, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)

    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        root_logger.addHandler(file_handler)

    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module, prefixed with ``crossfile.`` when needed.

    Example:
        logger = get_logger(__name__)
        logger.debug("Resolved %d imports", count)
    """
    if not _initialized:
        setup_logging()

    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"

    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)

    return _loggers[name]


class LogContext:
    """
    Context manager logging the start and end of an analysis phase.

    Usage:
        with LogContext(logger, "Building dependency graph"):
            ...
    """

    def __init__(self, logger: logging.Logger, context: str, level: int = logging.DEBUG) -> None:
        self.logger = logger
        self.context = context
        self.level = level

    def __enter__(self) -> "LogContext":
        self.logger.log(self.level, "%s started", self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.logger.error("%s failed: %s", self.context, exc_val)
        else:
            self.logger.log(self.level, "%s completed", self.context)
