"""
Hugin — Arduino project code cloning detector: job dispatcher.

Copyright (c) 2026 ikubaku
Licensed under the MIT License.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "hugin"
FILE_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
MAX_VERBOSITY = 2


def resolve_log_level(*, verbosity: int, quiet: bool) -> int:
    # Verbosity overrides --no-warn.
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    if quiet:
        return logging.ERROR
    return logging.WARNING


def configure_logging(
    *,
    level: int,
    console: Console,
    log_file: Path | None = None,
) -> logging.Logger:
    """
    Route the package loggers to ``console`` through a RichHandler.

    With ``log_file`` every record at ``level`` goes to the file, and only
    errors are duplicated to the console.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)
    logger.propagate = False

    console_handler = RichHandler(
        console=console,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )
    console_handler.setLevel(logging.ERROR if log_file is not None else level)
    logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    return logger
