"""
Logging module for the rl_approx library.

This module provides JSON-formatted logging functionality.
"""

from rl_approx.logging.logger import (
    JsonFormatter,
    setup_logger,
    get_logger,
    reset_logger,
    log_binner_built,
    log_bin_failure
)

__all__ = [
    "JsonFormatter",
    "setup_logger",
    "get_logger",
    "reset_logger",
    "log_binner_built",
    "log_bin_failure"
]
