#!/usr/bin/env python3
"""
Quick Start Guide for the Universal UTF Reader.

Writes the same text in several layouts to a temporary directory and reads
each one back as UTF-8, showing how a byte-order mark overrides the hint.
"""

import io
import sys
import tempfile
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from universal_utf_reader import (
    DecoderConfig,
    EncodingHint,
    decode,
    decode_bytes,
    detect_file_encoding,
    line_scanner,
    read_all_as_utf8,
)

SAMPLE_TEXT = "Grüße, 世界 \U0001F30D\r\nsecond line\r\n"


def write_samples(directory):
    """Write the sample text in every supported layout."""
    layouts = {
        "sample.utf8": SAMPLE_TEXT.encode("utf-8"),
        "sample.utf8bom": b"\xef\xbb\xbf" + SAMPLE_TEXT.encode("utf-8"),
        "sample.utf16": b"\xff\xfe" + SAMPLE_TEXT.encode("utf-16-le"),
        "sample.utf16le": SAMPLE_TEXT.encode("utf-16-le"),
        "sample.utf16be": SAMPLE_TEXT.encode("utf-16-be"),
    }
    paths = {}
    for name, data in layouts.items():
        path = directory / name
        path.write_bytes(data)
        paths[name] = path
    return paths


def quick_start_example(paths):
    """Read every sample under every hint."""

    print("🚀 QUICK START - Universal UTF Reader")
    print("=" * 40)

    expected = SAMPLE_TEXT.encode("utf-8")
    hints = [EncodingHint.UTF8, EncodingHint.UTF16LE, EncodingHint.UTF16BE]

    for name, path in paths.items():
        detection = detect_file_encoding(path, EncodingHint.UTF8)
        print(f"\n📄 {name}: {detection.encoding} ({detection.method.value})")
        for hint in hints:
            marker = "✅" if read_all_as_utf8(path, hint) == expected else "❌"
            print(f"  {marker} hint={hint.name}")


def line_scanner_example(paths):
    """Iterate lines of a BOM-less UTF-16 file."""

    print("\n\n📋 LINE SCANNER EXAMPLE")
    print("=" * 30)

    with line_scanner(paths["sample.utf16le"], EncodingHint.WINDOWS) as scanner:
        for line in scanner:
            print(f"  {scanner.lines_read}: {line}")


def streaming_example():
    """Decode an in-memory stream in small chunks and inspect metrics."""

    print("\n\n⚡ STREAMING EXAMPLE")
    print("=" * 25)

    # Trailing unpaired high surrogate becomes U+FFFD
    payload = b"\xfe\xff" + SAMPLE_TEXT.encode("utf-16-be") + b"\xd8\x00"
    config = DecoderConfig(buffer_size=4)

    with decode(io.BytesIO(payload), EncodingHint.UTF8, config=config) as stream:
        text = stream.read().decode("utf-8")
        reader = stream.raw

    print(f"  Decoded: {text!r}")
    print(f"  Encoding: {reader.encoding_result.encoding}")
    for key, value in reader.metrics.as_dict().items():
        print(f"  {key}: {value}")

    print(f"\n  decode_bytes: {decode_bytes(b'plain ascii').read()!r}")


def main():
    """Main function."""
    try:
        with tempfile.TemporaryDirectory() as tmp:
            paths = write_samples(Path(tmp))
            quick_start_example(paths)
            line_scanner_example(paths)
        streaming_example()

        print(f"\n✅ All examples completed successfully!")
        return 0

    except OSError as e:
        print(f"\n❌ Example failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
