"""Public file-level API for universal UTF reading."""

from .reader import (
    LineScanner,
    detect_file_encoding,
    line_scanner,
    open_as_utf8,
    read_all_as_utf8,
)

__all__ = [
    "LineScanner",
    "detect_file_encoding",
    "line_scanner",
    "open_as_utf8",
    "read_all_as_utf8",
]
