"""Result objects for universal UTF reading."""

from dataclasses import dataclass


@dataclass
class DecodeMetrics:
    """Counters collected while a single stream is decoded."""

    bytes_read: int = 0
    bytes_written: int = 0
    chunks_read: int = 0
    replacement_characters: int = 0
    processing_time_ms: float = 0.0

    @property
    def expansion_ratio(self) -> float:
        """Output bytes per input byte."""
        if self.bytes_read == 0:
            return 0.0
        return self.bytes_written / self.bytes_read

    @property
    def had_replacements(self) -> bool:
        """Whether any U+FFFD was emitted."""
        return self.replacement_characters > 0

    def as_dict(self) -> dict:
        return {
            "bytes_read": self.bytes_read,
            "bytes_written": self.bytes_written,
            "chunks_read": self.chunks_read,
            "replacement_characters": self.replacement_characters,
            "processing_time_ms": round(self.processing_time_ms, 3),
        }
