"""Utility functions for scansync.

Provides logger configuration for scripts and the command-line tool, and
small validation helpers shared by the monitor and the sender.

Example:
    >>> from scansync.utils import configure_logger
    >>> logger = configure_logger("scansync", level="DEBUG")
"""

import logging
import math
import numbers
from typing import Any

__all__ = ["configure_logger", "is_finite_positive_scalar", "warning_banner"]


def configure_logger(name: str, level: str = "INFO", structured: bool = False) -> logging.Logger:
    """Configure logger with specified settings.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        structured: If True, use structured (JSON) logging

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler()

    if structured:
        formatter = logging.Formatter('{"timestamp":"%(asctime)s","level":"%(levelname)s","name":"%(name)s","message":"%(message)s"}')
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def is_finite_positive_scalar(value: Any) -> bool:
    """Return True for a real, finite, strictly positive number.

    Booleans are rejected even though they are ints.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value) and value > 0


def warning_banner(*lines: str, width: int = 70) -> str:
    """Frame lines of text in a block that stands out in a console log."""
    rule = "!" * width
    body = "\n".join(f"!!  {line}" for line in lines)
    return f"\n{rule}\n{body}\n{rule}"
