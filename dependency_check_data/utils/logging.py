"""
Logging configuration and utilities.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional


class PipelineCommandFormatter(logging.Formatter):
    """Prefixes records with the agent's ##[debug]/##[warning]/##[error] markers."""

    PREFIXES = {
        logging.DEBUG: "##[debug]",
        logging.WARNING: "##[warning]",
        logging.ERROR: "##[error]",
        logging.CRITICAL: "##[error]",
    }

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        prefix = self.PREFIXES.get(record.levelno, "")
        return prefix + message


def setup_root_logger(log_file: Optional[Path] = None,
                      level: str = "INFO",
                      format_string: str = "%(message)s",
                      debug: bool = False,
                      max_file_size_mb: int = 10,
                      backup_count: int = 5):
    """
    Set up the root logger for the task.

    Args:
        log_file: Optional log file path
        level: Logging level
        format_string: Console format
        debug: Force DEBUG level (system.debug)
        max_file_size_mb: Rotate the log file at this size
        backup_count: Number of rotated files to keep
    """
    root_logger = logging.getLogger()

    # Clear any existing handlers
    root_logger.handlers.clear()

    root_logger.setLevel(logging.DEBUG if debug else getattr(logging, level.upper()))

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(PipelineCommandFormatter(format_string))
    root_logger.addHandler(console_handler)

    # File handler
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count
        )
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
        ))
        root_logger.addHandler(file_handler)

    # Set levels for third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
