"""
Logger implementation for the rl_approx library.

This module provides JSON-formatted logging. Messages are usually dicts with
an ``"event"`` key; numpy values inside them are converted to plain JSON.
When debugging is enabled, logs are written to timestamped files in the
configured log directory.
"""

import os
import json
import logging
import datetime
from typing import Any, Optional, Sequence

import numpy as np

from rl_approx.config import get_settings

LOGGER_NAME = "rl_approx"

# Arrays and sequences longer than this are summarized instead of dumped
MAX_SERIALIZED_ITEMS = 100


class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for logging."""

    def _serialize(self, obj: Any) -> Any:
        """Serialize objects to JSON-compatible format."""
        if isinstance(obj, np.ndarray):
            if obj.size > MAX_SERIALIZED_ITEMS:
                shape_str = 'x'.join(str(dim) for dim in obj.shape)
                sample = obj.flatten()[:5].tolist()
                return f"ndarray({shape_str}): sample={sample}..."
            return obj.tolist()
        elif isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.bool_):
            return bool(obj)
        elif isinstance(obj, (list, tuple)):
            if len(obj) > MAX_SERIALIZED_ITEMS:
                return [self._serialize(item) for item in list(obj)[:5]] + ["..."]
            return [self._serialize(item) for item in obj]
        elif isinstance(obj, dict):
            return {str(k): self._serialize(v) for k, v in obj.items()}
        elif isinstance(obj, (str, int, float, bool)) or obj is None:
            return obj
        return repr(obj)

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_data = {
            'timestamp': datetime.datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if isinstance(record.msg, dict):
            log_data['data'] = self._serialize(record.msg)
        else:
            log_data['message'] = record.getMessage()
            if hasattr(record, 'data'):
                log_data['data'] = self._serialize(record.data)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


# Global logger instance
_logger = None

_LEVEL_MAP = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR
}


def setup_logger(
    debug: Optional[bool] = None,
    log_level: Optional[str] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up the logger with the specified configuration.

    Arguments left as None fall back to the library settings.

    Args:
        debug: Whether to enable debugging
        log_level: The log level (debug, info, warning, error)
        log_file: Optional custom log file path

    Returns:
        Configured logger instance
    """
    global _logger

    if _logger is not None:
        return _logger

    settings = get_settings()
    debug = settings.debug if debug is None else debug
    log_level = settings.log_level if log_level is None else log_level
    log_file = settings.log_file if log_file is None else log_file

    logger = logging.getLogger(LOGGER_NAME)

    if debug:
        logger.setLevel(_LEVEL_MAP.get(log_level.lower(), logging.INFO))
    else:
        logger.setLevel(logging.WARNING)

    if debug or log_file is not None:
        logs_dir = os.path.join(os.getcwd(), settings.log_dir)

        if log_file is None:
            timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
            log_file = os.path.join(logs_dir, f"rl_approx_{timestamp}.json")
        elif not os.path.isabs(log_file):
            log_file = os.path.join(logs_dir, log_file)
        os.makedirs(os.path.dirname(log_file), exist_ok=True)

        handler = logging.FileHandler(log_file)
        handler.setFormatter(JsonFormatter())
    else:
        handler = logging.NullHandler()

    logger.addHandler(handler)
    _logger = logger

    if debug:
        logger.info({
            "event": "logger_initialized",
            "log_level": log_level,
            "log_file": log_file
        })

    return logger


def get_logger() -> logging.Logger:
    """
    Get the configured logger instance.

    Returns:
        Logger instance
    """
    global _logger

    if _logger is None:
        _logger = setup_logger()

    return _logger


def reset_logger() -> None:
    """Detach and close the handlers installed by ``setup_logger``."""
    global _logger

    if _logger is None:
        return
    for handler in list(_logger.handlers):
        _logger.removeHandler(handler)
        handler.close()
    _logger = None


def log_binner_built(
    interval_counts: np.ndarray,
    low: np.ndarray,
    high: np.ndarray,
    widths: np.ndarray,
    boundaries: Sequence[np.ndarray]
) -> None:
    """
    Log a summary of a newly constructed binner.

    Args:
        interval_counts: Number of bins per dimension
        low: Lower bounds per dimension
        high: Upper bounds per dimension
        widths: Bin width per dimension
        boundaries: Boundary arrays per dimension
    """
    logger = get_logger()
    if not logger.isEnabledFor(logging.DEBUG):
        return

    logger.debug({
        "event": "binner_built",
        "dimensions": len(widths),
        "dtype": widths.dtype.name,
        "interval_counts": interval_counts,
        "low": low,
        "high": high,
        "widths": widths,
        "last_boundary_error": [
            float(b[-1] - h) for b, h in zip(boundaries, high)
        ]
    })


def log_bin_failure(error: Exception, values: Any) -> None:
    """
    Log a classification that was rejected.

    Args:
        error: The error about to be raised
        values: The values that were being classified
    """
    get_logger().debug({
        "event": "bin_failure",
        "error": type(error).__name__,
        "detail": str(error),
        "dimension": getattr(error, "dimension", None),
        "values": values
    })
