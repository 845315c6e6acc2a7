"""Universal UTF Reader.

Read text files and streams as UTF-8 without knowing whether they are UTF-8,
UTF-16LE or UTF-16BE. A byte-order mark, when present, always decides the
encoding; otherwise the caller's EncodingHint does.

Progressive API Disclosure:
- Level 1: File functions - read_all_as_utf8(), open_as_utf8(), line_scanner()
- Level 2: Stream functions - decode(), decode_bytes()
- Level 3: Configured decoding - DecoderConfig and UTF8DecodingReader
"""

__version__ = "0.1.0"
__author__ = "Universal UTF Reader Team"

# Progressive API disclosure - Level 1: File functions
from .api import (
    LineScanner,
    detect_file_encoding,
    line_scanner,
    open_as_utf8,
    read_all_as_utf8,
)

# Progressive API disclosure - Level 2 and 3: Streams and configuration
from .character import (
    DecoderConfig,
    DecoderState,
    DetectionMethod,
    EncodingHint,
    EncodingResult,
    UTF8DecodingReader,
    decode,
    decode_bytes,
    detect_encoding,
)
from .shared import DecodeMetrics

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: File functions
    "read_all_as_utf8",
    "open_as_utf8",
    "line_scanner",
    "detect_file_encoding",
    "LineScanner",

    # Level 2: Stream functions
    "decode",
    "decode_bytes",
    "detect_encoding",

    # Level 3: Configuration and decoder internals
    "DecoderConfig",
    "DecoderState",
    "UTF8DecodingReader",

    # Result objects
    "EncodingHint",
    "EncodingResult",
    "DetectionMethod",
    "DecodeMetrics",
]
