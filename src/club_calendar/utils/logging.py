"""Logging configuration for Club Calendar application."""

import logging
import sys
from pathlib import Path
from typing import Optional

RECORDS_LOGGER = "club_calendar.sources.records"


class ValidationDetailFilter(logging.Filter):
    """Keep pydantic error dumps of skipped snapshot records off the console."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not (record.name == RECORDS_LOGGER and record.levelno < logging.INFO)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure application logging.

    Console output goes to stderr so agenda listings on stdout stay clean.
    Validation details of skipped records only reach the log file.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("club_calendar")
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if level.upper() == "DEBUG" else logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    console_handler.addFilter(ValidationDetailFilter())
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
            )
        )
        logger.addHandler(file_handler)

    return logger
