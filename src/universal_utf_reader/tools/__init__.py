"""Developer tools for Universal UTF Reader.

This module provides memory sampling used to report how much resident memory
a decode run needed.
"""

from .memory import MemorySampler, MemoryStats

__all__ = [
    "MemorySampler",
    "MemoryStats",
]
