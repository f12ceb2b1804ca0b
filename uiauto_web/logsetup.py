# uiauto_web/logsetup.py
"""
Logging configuration for the runner.
Console output always; optional file output.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

ROOT_LOGGER = "uiauto_web"

_initialized: bool = False


class RunLogFormatter(logging.Formatter):
    """Formatter with millisecond timestamps and logger name."""

    def __init__(self, include_name: bool = True):
        self.include_name = include_name
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        level = record.levelname.ljust(8)

        if self.include_name:
            prefix = f"[{timestamp}] [{level}] {record.name}: "
        else:
            prefix = f"[{timestamp}] [{level}] "

        message = record.getMessage()

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return prefix + message


def setup_logging(
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Initialize runner logging. Safe to call more than once.

    Args:
        console_level: Logging level for console output
        file_level: Logging level for file output
        log_file: Optional path to a log file
    """
    global _initialized

    root_logger = logging.getLogger(ROOT_LOGGER)
    if _initialized:
        for handler in root_logger.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setLevel(console_level)
        return root_logger

    root_logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(RunLogFormatter(include_name=console_level <= logging.DEBUG))
    root_logger.addHandler(console_handler)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            file_handler.setLevel(file_level)
            file_handler.setFormatter(RunLogFormatter(include_name=True))
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(f"Could not create log file: {e}")

    _initialized = True
    return root_logger
