import logging
import time
from typing import Any, Dict, Iterable, List, Tuple

from .base import OutOfRangeError
from .bitset import BitSet
from .storage import DEFAULT_MEDIUM, MEDIA, allocate_store


logger = logging.getLogger(__name__)


class BitSetBuilder:
    """Collects positions and ranges, then builds a BitSet on the chosen medium."""

    def __init__(self, bit_length: int, medium: str = DEFAULT_MEDIUM):
        """
        Initialize builder for sets of a fixed size.

        Args:
            bit_length: Size of the sets to build, in bits
            medium: Storage medium name, one of the keys of storage.MEDIA
        """
        if bit_length < 0:
            raise ValueError(f"Bit length must not be negative, got {bit_length}")
        if medium not in MEDIA:
            raise ValueError(f"Unknown storage medium '{medium}'")
        self.bit_length = bit_length
        self.medium = medium

        self.positions: List[int] = []
        self.ranges: List[Tuple[int, int]] = []

        self.stats: Dict[str, Any] = {
            "build_time": 0,
            "positions": 0,
            "ranges": 0,
            "bits_set": 0,
        }

    def _check_position(self, position: int):
        if not 0 <= position < self.bit_length:
            raise OutOfRangeError(
                f"Bit position {position} out of range [0, {self.bit_length})"
            )

    def add(self, position: int) -> "BitSetBuilder":
        self._check_position(position)
        self.positions.append(position)
        return self

    def add_range(self, start: int, end: int) -> "BitSetBuilder":
        """Queue the inclusive range [start, end]; an inverted range sets nothing."""
        self._check_position(start)
        self._check_position(end)
        self.ranges.append((start, end))
        return self

    def update(self, positions: Iterable[int]) -> "BitSetBuilder":
        # Validate everything before queueing anything
        batch = list(positions)
        for position in batch:
            self._check_position(position)
        self.positions.extend(batch)
        return self

    def build(self) -> BitSet:
        """Allocate a fresh set and apply all queued ranges and positions."""
        start_time = time.time()

        result = BitSet(self.bit_length, allocate_store(self.bit_length, self.medium))
        for start, end in self.ranges:
            result.set_range(start, end)
        for position in self.positions:
            result.set(position)

        self.stats["build_time"] = time.time() - start_time
        self.stats["positions"] = len(self.positions)
        self.stats["ranges"] = len(self.ranges)
        self.stats["bits_set"] = result.count()
        logger.debug(f"Built {result!r}: {self.stats}")

        return result
