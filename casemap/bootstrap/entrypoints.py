"""
bootstrap/entrypoints.py - Process entry helpers

Logging setup and a one-call builder for a configured resolver.
"""

from __future__ import annotations
from typing import Optional
import json
import logging
import sys

from .config import CaseMapConfig, LoggingConfig, load_config

logger = logging.getLogger(__name__)

_DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        return json.dumps({
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        })


def setup_logging(
    level: str = "INFO",
    log_file: str = None,
    json_format: bool = False,
    fmt: str = _DEFAULT_FORMAT,
) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
        json_format: Use JSON format for logs
        fmt: Format string for plain-text logs
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(fmt)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)

    # File handler
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)


def setup_logging_from_config(config: LoggingConfig, debug: bool = False) -> None:
    setup_logging(
        level="DEBUG" if debug else config.level,
        log_file=config.log_file,
        json_format=config.json_logs,
        fmt=config.format,
    )


def create_app(config_file: Optional[str] = None, configure_logging: bool = True):
    """
    Load configuration, optionally set up logging, and build the app.

    Returns:
        A built CaseMapApp
    """
    from .app import CaseMapApp

    config: CaseMapConfig = load_config(config_file)
    if configure_logging:
        setup_logging_from_config(config.logging, debug=config.debug)

    return CaseMapApp(config).build()
