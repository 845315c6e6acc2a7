"""Command-line interface module for Universal UTF Reader.

This module provides the universal-utf8 tool for printing files as UTF-8 and
reporting how their encoding is resolved.
"""

from .main import main

__all__ = ["main"]
