"""
================================================================================
Logging Setup
================================================================================

Centralized Loguru configuration for the suite.

Call `init_logger()` once at session start (the root conftest does) so
every framework module logging through `loguru.logger` shares the same
sinks and format.

Author: Automation Team
License: MIT
================================================================================
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

DEFAULT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"

_logger_initialized: bool = False


def init_logger(
    level: Optional[str] = None,
    format_str: Optional[str] = None,
    log_file: Optional[str] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    force: bool = False,
) -> None:
    """
    Initializes the global Loguru logger with consistent configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to INFO.
        format_str: Custom log format string.
        log_file: Optional file sink path (rotated and compressed).
        rotation: Rotation policy for the file sink.
        retention: Retention policy for the file sink.
        force: Re-initialize even if already configured.
    """
    global _logger_initialized

    if _logger_initialized and not force:
        return

    log_level = (level or "INFO").upper()
    log_format = format_str or DEFAULT_FORMAT

    # Remove default logger and add configured one
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level,
        format=log_format,
        colorize=True,
        backtrace=True,
        diagnose=True,
    )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=log_level,
            format=log_format.replace("{level: <8}", "{level}"),  # Remove padding for file
            rotation=rotation,
            retention=retention,
            compression="zip",
            enqueue=True,
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {log_level}")


def init_logger_from_config(section: Dict[str, Any]) -> None:
    """Initialize from a `logging:` config section (level, format, file, rotation, retention)."""
    init_logger(
        level=section.get("level"),
        format_str=section.get("format"),
        log_file=section.get("file"),
        rotation=section.get("rotation", "10 MB"),
        retention=section.get("retention", "7 days"),
    )


def get_logger():
    """
    Returns the configured Loguru logger instance.

    Ensures the logger is initialized before returning.
    """
    if not _logger_initialized:
        init_logger()
    return logger


__all__ = [
    "get_logger",
    "init_logger",
    "init_logger_from_config",
]
