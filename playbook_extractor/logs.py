"""
Logging Setup

Console logging for command-line runs plus an optional rotating JSON-line log
file under a log directory.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

PACKAGE_LOGGER = "playbook_extractor"
LOG_FILE_NAME = "extraction.log"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
    '"message": "%(message)s", "name": "%(name)s"}'
)
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(
    level: Union[int, str] = logging.INFO,
    log_dir: Optional[Path] = None,
    json_format: bool = False,
    max_log_size: int = 10 * 1024 * 1024,  # 10 MB
    log_retention_count: int = 5,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Level name or number for the package logger
        log_dir: When given, also write a rotating log file here
        json_format: Use JSON lines on the console as well as in the file
        max_log_size: Rotation threshold for the log file
        log_retention_count: Rotated files to keep

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Reconfiguring replaces handlers from an earlier call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(JSON_FORMAT if json_format else CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=max_log_size,
            backupCount=log_retention_count,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(JSON_FORMAT))
        logger.addHandler(file_handler)

    return logger
