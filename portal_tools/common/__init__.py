"""
================================================================================
Portal Tools Common Utilities
================================================================================

Shared logging setup for the suite and its runner.

Usage:
    from portal_tools.common import init_logger

    init_logger(level="DEBUG")

================================================================================
"""

from .logger import get_logger, init_logger, init_logger_from_config

__all__ = [
    "get_logger",
    "init_logger",
    "init_logger_from_config",
]
