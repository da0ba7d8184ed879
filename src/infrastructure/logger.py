"""
Logger Module

Provides centralized logging to the console and to a log file.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional

# Application log file path (relative to project root)
_LOG_FILE_NAME = "app.log"

# Overrides the log file location, e.g. for CI or read-only installs
LOG_FILE_ENV = "ABSENSI_LOG_FILE"

_FORMATTER = logging.Formatter(
    fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)

_console_level = logging.INFO

# Console handlers attached by get_logger, keyed by logger name
_console_handlers: Dict[str, logging.Handler] = {}


def _get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent


def _default_log_path() -> Path:
    override = os.environ.get(LOG_FILE_ENV)
    return Path(override) if override else _get_project_root() / _LOG_FILE_NAME


def get_logger(name: str, log_file: Optional[str] = None) -> logging.Logger:
    """
    Get or create a logger with console and file handlers.

    Args:
        name: Logger name (typically the component, e.g. "ReportService")
        log_file: Optional custom log file path. If None, uses the default app.log

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)

    # Console goes to stderr so command output on stdout stays clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_console_level)
    console_handler.setFormatter(_FORMATTER)
    logger.addHandler(console_handler)
    _console_handlers[name] = console_handler

    log_path = Path(log_file) if log_file else _default_log_path()
    try:
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(_FORMATTER)
        logger.addHandler(file_handler)
    except OSError as e:
        logger.warning(f"Cannot open log file {log_path}: {e}")

    return logger


def set_console_level(level: int) -> None:
    """Change the console verbosity of every logger created by get_logger."""
    global _console_level
    _console_level = level
    for handler in _console_handlers.values():
        handler.setLevel(level)
