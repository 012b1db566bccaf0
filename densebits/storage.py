import array
import ctypes
import logging
import struct
from abc import ABC, abstractmethod
from typing import Dict, Type

from .base import OutOfRangeError
from .utils import blocks_for_bits


logger = logging.getLogger(__name__)

DEFAULT_MEDIUM = "array"


class BlockStore(ABC):
    """Fixed-length array of fixed-width unsigned integer blocks.

    A store holds raw bits only: no masking happens here. Subclasses implement
    the private accessors; the public read_block/write_block check the index
    first, so a negative index is rejected instead of wrapping around.
    """

    #: Bits per block, static for each medium
    block_width: int = 0

    def __init__(self, block_count: int):
        if block_count < 0:
            raise ValueError(f"Block count must not be negative, got {block_count}")
        self._block_count = block_count

    @classmethod
    def for_bits(cls, bit_length: int) -> "BlockStore":
        """Allocate a zero-filled store large enough for bit_length bits."""
        return cls(blocks_for_bits(bit_length, cls.block_width))

    @property
    def block_count(self) -> int:
        return self._block_count

    def __len__(self) -> int:
        return self._block_count

    def read_block(self, index: int) -> int:
        self._check_index(index)
        return self._read_block(index)

    def write_block(self, index: int, value: int) -> None:
        self._check_index(index)
        self._write_block(index, value)

    @abstractmethod
    def duplicate(self) -> "BlockStore":
        """Return an independent store with identical contents."""
        ...

    @abstractmethod
    def _read_block(self, index: int) -> int:
        ...

    @abstractmethod
    def _write_block(self, index: int, value: int) -> None:
        ...

    def _check_index(self, index: int):
        if not 0 <= index < self._block_count:
            raise OutOfRangeError(
                f"Block index {index} out of range [0, {self._block_count})"
            )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} blocks={self._block_count} width={self.block_width}>"


class ArrayBlockStore(BlockStore):
    """Machine words held in an array.array("Q")."""
    TYPECODE = "Q"
    block_width = array.array(TYPECODE).itemsize * 8

    def __init__(self, block_count: int):
        super().__init__(block_count)
        self._blocks = array.array(self.TYPECODE)
        self._blocks.extend([0] * block_count)
        logger.debug(f"Allocated array store with {block_count} blocks")

    def _read_block(self, index: int) -> int:
        return self._blocks[index]

    def _write_block(self, index: int, value: int) -> None:
        # array raises OverflowError for values that do not fit a word
        self._blocks[index] = value

    def duplicate(self) -> "ArrayBlockStore":
        clone = type(self).__new__(type(self))
        clone._blocks = array.array(self.TYPECODE, self._blocks)
        clone._block_count = self._block_count
        logger.debug(f"Duplicated array store with {self._block_count} blocks")
        return clone


class BufferBlockStore(BlockStore):
    """64-bit little-endian blocks packed into a raw zero-filled memory buffer."""
    BLOCK_FORMAT = "<Q"
    BYTES_PER_BLOCK = struct.calcsize(BLOCK_FORMAT)
    block_width = BYTES_PER_BLOCK * 8

    def __init__(self, block_count: int):
        super().__init__(block_count)
        # create_string_buffer zeroes the memory
        self._buffer = ctypes.create_string_buffer(self.BYTES_PER_BLOCK * block_count)
        logger.debug(f"Allocated buffer store with {block_count} blocks")

    @property
    def size(self) -> int:
        """Size of the underlying buffer in bytes."""
        return ctypes.sizeof(self._buffer)

    def _read_block(self, index: int) -> int:
        return struct.unpack_from(self.BLOCK_FORMAT, self._buffer, index * self.BYTES_PER_BLOCK)[0]

    def _write_block(self, index: int, value: int) -> None:
        try:
            struct.pack_into(self.BLOCK_FORMAT, self._buffer, index * self.BYTES_PER_BLOCK, value)
        except struct.error as e:
            raise OverflowError(f"Block value {value} does not fit {self.block_width} bits") from e

    def duplicate(self) -> "BufferBlockStore":
        clone = type(self)(self._block_count)
        ctypes.memmove(clone._buffer, self._buffer, self.size)
        logger.debug(f"Duplicated buffer store with {self._block_count} blocks")
        return clone


class BytesBlockStore(BlockStore):
    """One block per byte of a bytearray."""
    block_width = 8

    def __init__(self, block_count: int):
        super().__init__(block_count)
        self._data = bytearray(block_count)
        logger.debug(f"Allocated bytes store with {block_count} blocks")

    def to_bytes(self) -> bytes:
        return bytes(self._data)

    def _read_block(self, index: int) -> int:
        return self._data[index]

    def _write_block(self, index: int, value: int) -> None:
        # bytearray raises ValueError outside 0..255
        self._data[index] = value

    def duplicate(self) -> "BytesBlockStore":
        clone = type(self).__new__(type(self))
        clone._data = bytearray(self._data)
        clone._block_count = self._block_count
        logger.debug(f"Duplicated bytes store with {self._block_count} blocks")
        return clone


MEDIA: Dict[str, Type[BlockStore]] = {
    "array": ArrayBlockStore,
    "buffer": BufferBlockStore,
    "bytes": BytesBlockStore,
}


def allocate_store(bit_length: int, medium: str = DEFAULT_MEDIUM) -> BlockStore:
    """Allocate a zero-filled store of the named medium sized for bit_length bits."""
    try:
        store_cls = MEDIA[medium]
    except KeyError:
        logger.error(f"Unknown storage medium '{medium}', expected one of {sorted(MEDIA)}")
        raise ValueError(f"Unknown storage medium '{medium}'") from None
    if bit_length < 0:
        raise ValueError(f"Bit length must not be negative, got {bit_length}")
    return store_cls.for_bits(bit_length)
