from typing import Iterable

from .base import (
    BitSetError,
    BlockAction,
    LengthMismatchError,
    OutOfRangeError,
    Replace,
)
from .bitset import BitSet
from .builder import BitSetBuilder
from .storage import (
    DEFAULT_MEDIUM,
    MEDIA,
    ArrayBlockStore,
    BlockStore,
    BufferBlockStore,
    BytesBlockStore,
    allocate_store,
)
from .vector import BitVector


__all__ = [
    "BitVector",
    "BitSet",
    "BitSetBuilder",
    "BlockStore",
    "ArrayBlockStore",
    "BufferBlockStore",
    "BytesBlockStore",
    "MEDIA",
    "DEFAULT_MEDIUM",
    "allocate_store",
    "BlockAction",
    "Replace",
    "BitSetError",
    "OutOfRangeError",
    "LengthMismatchError",
    "create_bitvector",
    "create_bitset",
]

__version__ = "1.0.0"


def create_bitvector(bit_length: int, medium: str = DEFAULT_MEDIUM) -> BitVector:
    """Create a zero-filled BitVector on the named storage medium."""
    return BitVector(bit_length, allocate_store(bit_length, medium))


def create_bitset(bit_length: int, medium: str = DEFAULT_MEDIUM, positions: Iterable[int] = ()) -> BitSet:
    """
    Factory function to create a BitSet on a specific storage medium.

    Args:
        bit_length: Size of the set in bits
        medium: 'array' (64-bit words), 'buffer' (raw memory) or 'bytes' (8-bit blocks)
        positions: Optional initial members
    """
    return BitSetBuilder(bit_length, medium).update(positions).build()
