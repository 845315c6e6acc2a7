"""Streaming UTF-8/UTF-16 to UTF-8 decoder.

The decoder sniffs at most the first three bytes of its source for a BOM,
then feeds the rest of the source through an incremental codec so that code
points and surrogate pairs split across reads are reassembled. Malformed
input is replaced with U+FFFD; decoding never aborts on bad data.
"""

import codecs
import io
import json
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, Union

from ..shared.logging import get_logger
from ..shared.result import DecodeMetrics
from .encoding import (
    MAX_BOM_LENGTH,
    EncodingDetector,
    EncodingHint,
    EncodingResult,
    HintType,
)

DEFAULT_BUFFER_SIZE = 8192
REPLACEMENT_CHARACTER = "\uFFFD"


class DecoderState(Enum):
    """Lifecycle of a single decoded stream."""

    DETECTING = auto()   # BOM not examined yet
    STREAMING = auto()   # Encoding resolved, forwarding decoded bytes
    DONE = auto()        # Source exhausted and decoder flushed


@dataclass
class DecoderConfig:
    """Configuration for universal decoding."""

    hint: EncodingHint = EncodingHint.HTML5
    buffer_size: int = DEFAULT_BUFFER_SIZE
    normalize_newlines: bool = False
    correlation_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate decoder configuration."""
        self.hint = EncodingHint.resolve(self.hint)
        if not isinstance(self.buffer_size, int) or isinstance(self.buffer_size, bool):
            raise ValueError("buffer_size must be an integer")
        if self.buffer_size <= 0:
            raise ValueError("buffer_size must be > 0")

    @classmethod
    def windows(cls) -> "DecoderConfig":
        """Assume UTF-16LE when there is no BOM."""
        return cls(hint=EncodingHint.WINDOWS)

    @classmethod
    def posix(cls) -> "DecoderConfig":
        """Assume UTF-8 when there is no BOM."""
        return cls(hint=EncodingHint.POSIX)

    @classmethod
    def html5(cls) -> "DecoderConfig":
        """W3C HTML5 behaviour: BOM wins, otherwise UTF-8."""
        return cls(hint=EncodingHint.HTML5)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DecoderConfig":
        """Build a configuration from a plain mapping such as parsed JSON.

        Unknown keys are kept in ``extra`` so callers layering their own
        settings on top (the CLI does) can read them back.
        """
        known = {"hint", "buffer_size", "normalize_newlines", "correlation_id"}
        kwargs = {key: value for key, value in data.items() if key in known}
        if "normalize_newlines" in kwargs:
            kwargs["normalize_newlines"] = bool(kwargs["normalize_newlines"])
        extra = {key: value for key, value in data.items() if key not in known}
        return cls(extra=extra, **kwargs)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "DecoderConfig":
        """Load configuration from a JSON file.

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file is not a JSON object or holds invalid values
        """
        with Path(config_path).open(encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Configuration in {config_path} must be a JSON object")
        return cls.from_dict(data)


class UTF8DecodingReader(io.RawIOBase):
    """Raw byte stream that yields UTF-8 regardless of the source's UTF encoding.

    The reader pulls from ``source`` only when its consumer asks for bytes.
    It does not close ``source`` unless ``close_source`` is set; whoever
    opened the source is responsible for closing it.
    """

    def __init__(
        self,
        source: BinaryIO,
        hint: Optional[HintType] = None,
        config: Optional[DecoderConfig] = None,
        close_source: bool = False,
    ) -> None:
        """Initialize the decoding reader.

        Args:
            source: Any object with a ``read(size) -> bytes`` method
            hint: Encoding assumed when the source carries no BOM,
                defaults to the configured hint
            config: Decoder configuration (buffer size, correlation ID)
            close_source: Close ``source`` when this reader is closed
        """
        self._source = source
        self.close_source = close_source
        super().__init__()
        self.config = config or DecoderConfig()
        self.hint = EncodingHint.resolve(hint if hint is not None else self.config.hint)
        self.metrics = DecodeMetrics()
        self.encoding_result: Optional[EncodingResult] = None

        self._state = DecoderState.DETECTING
        self._detector = EncodingDetector()
        self._decoder: Optional[codecs.IncrementalDecoder] = None
        self._pending = bytearray()
        self._logger = get_logger(__name__, self.config.correlation_id, "decoder")

    @property
    def state(self) -> DecoderState:
        return self._state

    @property
    def source(self) -> BinaryIO:
        return self._source

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: Any) -> int:
        """Fill ``buffer`` with decoded UTF-8 bytes, returning 0 at end of stream."""
        if self.closed:
            raise ValueError("I/O operation on closed file.")

        while not self._pending and self._state is not DecoderState.DONE:
            self._pull()

        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        del self._pending[:size]
        return size

    def close(self) -> None:
        if self.closed:
            return
        try:
            if self.close_source:
                self._source.close()
        finally:
            super().close()

    def _pull(self) -> None:
        """Advance the state machine by one read from the source."""
        started = time.perf_counter()
        try:
            if self._state is DecoderState.DETECTING:
                self._detect()
                return

            chunk = self._source.read(self.config.buffer_size)
            if not chunk:
                self._emit(self._decoder.decode(b"", final=True))
                self._finish()
                return

            self.metrics.bytes_read += len(chunk)
            self.metrics.chunks_read += 1
            self._emit(self._decoder.decode(chunk))
        except OSError:
            # Source is unusable after a failed read
            self._state = DecoderState.DONE
            self._pending.clear()
            raise
        finally:
            self.metrics.processing_time_ms += (time.perf_counter() - started) * 1000

    def _detect(self) -> None:
        prefix = b""
        # Short reads are legal, keep asking until a full BOM fits or EOF
        while len(prefix) < MAX_BOM_LENGTH:
            chunk = self._source.read(MAX_BOM_LENGTH - len(prefix))
            if not chunk:
                break
            prefix += chunk

        self.metrics.bytes_read += len(prefix)
        result = self._detector.detect(prefix, self.hint)
        self.encoding_result = result
        self._decoder = codecs.getincrementaldecoder(result.encoding)(errors="replace")
        self._state = DecoderState.STREAMING

        self._logger.debug(
            "Resolved stream encoding",
            extra={
                "encoding": result.encoding,
                "method": result.method.value,
                "hint": self.hint.name,
            }
        )

        self._emit(self._decoder.decode(prefix[result.bom_length:]))

    def _emit(self, text: str) -> None:
        if not text:
            return
        data = text.encode("utf-8")
        self.metrics.replacement_characters += text.count(REPLACEMENT_CHARACTER)
        self.metrics.bytes_written += len(data)
        self._pending += data

    def _finish(self) -> None:
        self._state = DecoderState.DONE
        self._logger.debug("Stream decoded", extra=self.metrics.as_dict())


def decode(
    source: BinaryIO,
    hint: Optional[HintType] = None,
    config: Optional[DecoderConfig] = None,
    close_source: bool = False,
) -> io.BufferedReader:
    """Wrap a byte source so that reading it yields UTF-8.

    Args:
        source: Binary stream that may be UTF-8, UTF-16LE or UTF-16BE
        hint: Encoding assumed when the source carries no BOM, defaults to
            ``config.hint`` (HTML5, i.e. UTF-8, without a config)
        config: Optional decoder configuration
        close_source: Whether closing the result also closes ``source``

    Returns:
        Buffered binary stream of UTF-8 bytes; the decoder itself is ``.raw``

    Examples:
        >>> decode(io.BytesIO(b"\\xff\\xfeh\\x00i\\x00")).read()
        b'hi'
    """
    config = config or DecoderConfig()
    reader = UTF8DecodingReader(source, hint, config, close_source=close_source)
    return io.BufferedReader(reader, buffer_size=config.buffer_size)


def decode_bytes(
    data: bytes,
    hint: Optional[HintType] = None,
    config: Optional[DecoderConfig] = None,
) -> io.BufferedReader:
    """In-memory variant of :func:`decode`."""
    return decode(io.BytesIO(data), hint, config, close_source=True)
