"""Character layer for universal UTF reading.

This package provides BOM detection with hint fallback and the streaming
decoder that turns UTF-8/UTF-16 input into UTF-8 output.
"""

from .encoding import (
    BOMDetector,
    DetectionMethod,
    EncodingDetector,
    EncodingHint,
    EncodingResult,
    detect_encoding,
)
from .stream import (
    DecoderConfig,
    DecoderState,
    UTF8DecodingReader,
    decode,
    decode_bytes,
)

__all__ = [
    # Modules
    "encoding",
    "stream",
    # Detection
    "BOMDetector",
    "DetectionMethod",
    "EncodingDetector",
    "EncodingHint",
    "EncodingResult",
    "detect_encoding",
    # Decoding
    "DecoderConfig",
    "DecoderState",
    "UTF8DecodingReader",
    "decode",
    "decode_bytes",
]
