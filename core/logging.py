"""
Logging setup utility

Shared logging configuration for the web API and the operator scripts.
- Console: INFO level
- File: INFO level (TimedRotatingFileHandler, daily)

Usage:
    from core.logging import setup_logging
    setup_logging("web")     # web API process
    setup_logging("worker")  # scripts/ (balance check)
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.constants import Paths


# Log format constants
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 14  # keep two weeks of files

# Loggers that are too chatty at INFO
NOISY_LOGGERS = [
    "aiosqlite",      # logs every executed statement
    "httpcore",
    "httpx",
    "asyncio",
    "uvicorn.access",
]


def get_log_dir(process_name: str) -> Path:
    """Log directory for a process

    Args:
        process_name: "web", "worker" or anything else

    Returns:
        Directory the process writes its log file to
    """
    if process_name == "web":
        return Paths.WEB_LOGS_DIR
    if process_name == "worker":
        return Paths.WORKER_LOGS_DIR
    return Paths.LOGS_DIR


def setup_logging(
    process_name: str,
    console_level: int = logging.INFO,
    file_level: int = logging.INFO,
    log_dir: Path | None = None,
) -> logging.Logger:
    """Initialise logging

    Writes to the console and to a daily rolling file in the process's
    log directory.

    Args:
        process_name: process name ("web" or "worker")
        console_level: console log level (default INFO)
        file_level: file log level (default INFO)
        log_dir: override for the log directory (tests)

    Returns:
        The configured root logger
    """
    if log_dir is None:
        log_dir = get_log_dir(process_name)
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / f"{process_name}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # handlers do the filtering

    # Drop existing handlers so repeated setup does not duplicate output
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # 1. Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # 2. File handler (daily rotation)
    file_handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        interval=1,
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.suffix = "%Y-%m-%d"  # web.log.2026-10-18
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    # 3. Quieten noisy third-party loggers
    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.info(f"Logging initialised: {process_name}")
    root_logger.info(f"  - console: {logging.getLevelName(console_level)}")
    root_logger.info(f"  - file: {log_file} ({logging.getLevelName(file_level)}, daily rotation)")

    return root_logger
