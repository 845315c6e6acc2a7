"""File-level API for universal UTF reading.

Drop-in replacements for ``open(path, "rb")`` and ``Path.read_bytes()`` that
return UTF-8 whether the file is UTF-8, UTF-16LE or UTF-16BE, with or without
a BOM. Every function here opens the file itself and therefore also owns
closing it.
"""

import io
import os
from typing import Iterator, Optional, Union

from universal_utf_reader.character import (
    DecoderConfig,
    EncodingDetector,
    EncodingHint,
    EncodingResult,
    decode,
)
from universal_utf_reader.character.encoding import MAX_BOM_LENGTH, HintType
from universal_utf_reader.shared import get_logger

PathType = Union[str, "os.PathLike[str]"]


def _open_source(path: PathType, correlation_id: Optional[str], component: str) -> io.BufferedReader:
    """Open ``path`` for binary reading, logging before propagating failures."""
    try:
        return open(path, "rb")
    except OSError as e:
        logger = get_logger(__name__, correlation_id, component).bind(path=os.fspath(path))
        logger.warning("Unable to open source file", extra={"error": str(e)})
        raise


def open_as_utf8(
    path: PathType,
    hint: Optional[HintType] = None,
    config: Optional[DecoderConfig] = None,
) -> io.BufferedReader:
    """Open a file for reading as UTF-8.

    The returned stream owns the underlying file: closing it (or leaving a
    ``with`` block) closes the file.

    Args:
        path: File to open
        hint: Encoding assumed when the file has no BOM
        config: Optional decoder configuration

    Returns:
        Binary stream of UTF-8 bytes

    Raises:
        OSError: If the file cannot be opened

    Examples:
        >>> with open_as_utf8("notes.txt", EncodingHint.WINDOWS) as stream:
        ...     data = stream.read()
    """
    correlation_id = config.correlation_id if config else None
    source = _open_source(path, correlation_id, "open_as_utf8")
    try:
        return decode(source, hint, config, close_source=True)
    except Exception:
        source.close()
        raise


def read_all_as_utf8(
    path: PathType,
    hint: Optional[HintType] = None,
    config: Optional[DecoderConfig] = None,
) -> bytes:
    """Read a whole file as UTF-8 and close it.

    Args:
        path: File to read
        hint: Encoding assumed when the file has no BOM
        config: Optional decoder configuration

    Returns:
        File contents re-encoded as UTF-8, BOM removed

    Raises:
        OSError: If the file cannot be opened or read
    """
    with open_as_utf8(path, hint, config) as stream:
        return stream.read()


def detect_file_encoding(
    path: PathType,
    hint: Optional[HintType] = None,
) -> EncodingResult:
    """Report which encoding :func:`open_as_utf8` would use for ``path``.

    Only the first few bytes of the file are read.
    """
    with _open_source(path, None, "detect_file_encoding") as source:
        prefix = source.read(MAX_BOM_LENGTH)
    return EncodingDetector().detect(prefix, hint or DecoderConfig().hint)


class LineScanner:
    """Iterate the decoded lines of a file.

    Lines are yielded as ``str`` without their trailing ``\\n`` or ``\\r\\n``;
    a final line ending in a bare ``\\r`` loses it too.
    The file is closed when iteration finishes or stops early, on
    :meth:`close`, or when leaving a ``with`` block.
    """

    def __init__(self, stream: io.BufferedReader) -> None:
        self._stream = stream
        self.lines_read = 0

    @property
    def closed(self) -> bool:
        return self._stream.closed

    @property
    def stream(self) -> io.BufferedReader:
        return self._stream

    def __iter__(self) -> Iterator[str]:
        if self.closed:
            return
        try:
            for raw_line in self._stream:
                self.lines_read += 1
                yield _strip_line_ending(raw_line).decode("utf-8")
        finally:
            self.close()

    def close(self) -> None:
        """Close the underlying file; safe to call more than once."""
        self._stream.close()

    def __enter__(self) -> "LineScanner":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def _strip_line_ending(line: bytes) -> bytes:
    if line.endswith(b"\n"):
        line = line[:-1]
    # Also drops a lone CR ending the last line
    if line.endswith(b"\r"):
        line = line[:-1]
    return line


def line_scanner(
    path: PathType,
    hint: Optional[HintType] = None,
    config: Optional[DecoderConfig] = None,
) -> LineScanner:
    """Open a file and return a :class:`LineScanner` over its decoded lines.

    Raises:
        OSError: If the file cannot be opened
    """
    return LineScanner(open_as_utf8(path, hint, config))
