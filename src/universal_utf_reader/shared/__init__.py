"""Shared utilities for universal UTF reading.

This module provides the result types and logging helpers used by every
layer of the package.
"""

from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import DecodeMetrics

__all__ = [
    "DecodeMetrics",
    "CorrelationLogger",
    "get_logger",
]
