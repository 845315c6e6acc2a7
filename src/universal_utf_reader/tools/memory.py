"""Process memory sampling for decode runs.

Decoding is streaming, so resident memory should stay flat however large the
input is. :class:`MemorySampler` records resident set size through psutil so
the CLI can report it next to the decode metrics.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import psutil

from universal_utf_reader.shared.logging import get_logger

BYTES_PER_MB = 1024 * 1024


@dataclass
class MemoryStats:
    """Resident memory observed over a run."""

    initial_resident_memory_mb: float = 0.0
    resident_memory_mb: float = 0.0
    peak_resident_memory_mb: float = 0.0
    samples: int = 0
    history: List[float] = field(default_factory=list)

    @property
    def growth_mb(self) -> float:
        """Peak minus the first sample."""
        if self.samples == 0:
            return 0.0
        return self.peak_resident_memory_mb - self.initial_resident_memory_mb

    def to_dict(self) -> Dict[str, Any]:
        return {
            "initial_resident_memory_mb": round(self.initial_resident_memory_mb, 3),
            "resident_memory_mb": round(self.resident_memory_mb, 3),
            "peak_resident_memory_mb": round(self.peak_resident_memory_mb, 3),
            "growth_mb": round(self.growth_mb, 3),
            "samples": self.samples,
        }


class MemorySampler:
    """Samples the resident memory of a process on demand."""

    def __init__(
        self,
        process: Optional[psutil.Process] = None,
        max_history: int = 1000
    ) -> None:
        """Initialize the sampler.

        Args:
            process: Process to watch, the current process by default
            max_history: Number of samples kept in ``stats.history``
        """
        self.process = process or psutil.Process()
        self.max_history = max_history
        self.stats = MemoryStats()
        self.logger = get_logger(__name__, None, "memory_sampler")

    def sample(self) -> float:
        """Record and return the current resident memory in MB."""
        try:
            rss_mb = self.process.memory_info().rss / BYTES_PER_MB
        except psutil.Error as e:
            self.logger.warning(f"Failed to get process memory info: {e}")
            return self.stats.resident_memory_mb

        stats = self.stats
        if stats.samples == 0:
            stats.initial_resident_memory_mb = rss_mb
        stats.samples += 1
        stats.resident_memory_mb = rss_mb
        stats.peak_resident_memory_mb = max(stats.peak_resident_memory_mb, rss_mb)
        stats.history.append(rss_mb)
        if len(stats.history) > self.max_history:
            del stats.history[0]
        return rss_mb

    def reset(self) -> None:
        self.stats = MemoryStats()
