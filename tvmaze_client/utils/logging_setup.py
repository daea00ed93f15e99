"""Logging setup for the TVmaze client with console and rotating file output"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tvmaze_client.config import LoggingConfig

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    log_level: str = "INFO",
    log_file: str | Path | None = None,
    log_to_console: bool = True,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    log_format: str | None = None,
) -> logging.Logger:
    """
    Set up logging for an application using the TVmaze client.

    This configures logging to write to:
    - Console (stdout)
    - File with rotation, when log_file is given

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file; its directory is created if needed
        log_to_console: Whether to log to console
        max_bytes: Maximum size of log file before rotation (default 10MB)
        backup_count: Number of backup files to keep (default 5)
        log_format: Custom log format string

    Returns:
        Configured root logger
    """
    # Convert log level string to logging constant
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()

    formatter = logging.Formatter(log_format or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.debug(
        f"Logging initialized - Level: {log_level}, "
        f"file: {log_file or 'disabled'}, console: {'enabled' if log_to_console else 'disabled'}"
    )

    return root_logger


def setup_logging_from_config(config: "LoggingConfig") -> logging.Logger:
    """Set up logging from a LoggingConfig section."""
    return setup_logging(
        log_level=config.level,
        log_file=config.file,
        max_bytes=config.max_bytes,
        backup_count=config.backup_count,
        log_format=config.format,
    )

