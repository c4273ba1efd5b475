"""Logging setup for the dr_analyzer CLI."""

from __future__ import annotations

import logging
from pathlib import Path


DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "dr_analyzer.log"
PACKAGE_LOGGER_NAME = "dr_analyzer"

_HANDLER_MARKER = "_dr_analyzer_handler"


def configure_logging(
    logs_root: Path,
    level: int = logging.INFO,
    console_level: int = logging.WARNING,
) -> logging.Logger:
    """Attach a console handler and a ``logs_root/dr_analyzer.log`` file handler.

    Handlers go on the ``dr_analyzer`` package logger, not the root logger.
    Calling this again swaps out the handlers from the previous call and
    leaves foreign handlers alone. Records still propagate upward.
    """

    logs_root.mkdir(parents=True, exist_ok=True)

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(level)

    for handler in list(package_logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            package_logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(fmt=DEFAULT_LOG_FORMAT, datefmt=DEFAULT_DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    file_handler = logging.FileHandler(logs_root / LOG_FILE_NAME, encoding="utf-8")
    file_handler.setLevel(level)

    for handler in (console_handler, file_handler):
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARKER, True)
        package_logger.addHandler(handler)

    return package_logger
