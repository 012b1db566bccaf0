from typing import Callable, Iterator, Optional, Union

from .base import BlockAction, OutOfRangeError, Replace
from .storage import ArrayBlockStore, BlockStore
from .utils import (
    block_index,
    block_offset,
    blocks_for_bits,
    from_mask,
    full_mask,
    popcount,
    tail_mask,
    to_mask,
)


BlockVisitor = Callable[[int, int], Union[BlockAction, Replace, None]]


class BitVector:
    """Fixed-length sequence of bits over any BlockStore.

    All masking lives here, so every medium behaves the same: bits past
    bit_length in the last block always read as zero, and can never be set
    through set_block or set_range.
    """

    def __init__(self, bit_length: int, store: Optional[BlockStore] = None):
        if bit_length < 0:
            raise ValueError(f"Bit length must not be negative, got {bit_length}")
        if store is None:
            store = ArrayBlockStore.for_bits(bit_length)
        required = blocks_for_bits(bit_length, store.block_width)
        if store.block_count < required:
            raise ValueError(
                f"Insufficient store for {bit_length} bits: "
                f"{store.block_count} blocks given, {required} needed"
            )
        self._bit_length = bit_length
        self._store = store
        self._width = store.block_width
        self._full_mask = full_mask(self._width)
        # the store may be larger than needed; only the required blocks are addressable
        self._block_count = required
        self._last_mask = tail_mask(bit_length, self._width)

    @property
    def bit_length(self) -> int:
        return self._bit_length

    @property
    def block_width(self) -> int:
        return self._width

    @property
    def block_count(self) -> int:
        return self._block_count

    @property
    def store(self) -> BlockStore:
        return self._store

    # --- bounds ---

    def _check_position(self, position: int):
        if not 0 <= position < self._bit_length:
            raise OutOfRangeError(
                f"Bit position {position} out of range [0, {self._bit_length})"
            )

    def _check_block(self, index: int):
        if not 0 <= index < self._block_count:
            raise OutOfRangeError(
                f"Block index {index} out of range [0, {self._block_count})"
            )

    def _mask_for(self, index: int) -> int:
        if index == self._block_count - 1:
            return self._last_mask
        return self._full_mask

    # --- single bits ---

    def set(self, position: int) -> bool:
        """Set a bit. Returns True if it changed from 0 to 1."""
        self._check_position(position)
        index = block_index(position, self._width)
        bit = 1 << block_offset(position, self._width)
        block = self._store.read_block(index)
        if block & bit:
            return False
        self._store.write_block(index, block | bit)
        return True

    def unset(self, position: int) -> bool:
        """Clear a bit. Returns True if it changed from 1 to 0."""
        self._check_position(position)
        index = block_index(position, self._width)
        bit = 1 << block_offset(position, self._width)
        block = self._store.read_block(index)
        if not block & bit:
            return False
        self._store.write_block(index, block ^ bit)
        return True

    def test(self, position: int) -> bool:
        self._check_position(position)
        index = block_index(position, self._width)
        bit = 1 << block_offset(position, self._width)
        return bool(self._store.read_block(index) & bit)

    # --- blocks ---

    def get_block(self, index: int) -> int:
        """Read a block; unused bits of the last block always read as 0."""
        self._check_block(index)
        return self._store.read_block(index) & self._mask_for(index)

    def set_block(self, index: int, value: int) -> bool:
        """Write a block. Returns True if the stored value changed.

        The value is reduced to the block width first (two's complement for
        negative ints, so ``~block`` can be written back directly), and the
        last block additionally drops the bits past bit_length.
        """
        self._check_block(index)
        value &= self._mask_for(index)
        if self._store.read_block(index) == value:
            return False
        self._store.write_block(index, value)
        return True

    def each_block(self, visitor: BlockVisitor) -> bool:
        """Visit every block in ascending order.

        The visitor is called as ``visitor(block, index)`` with the masked
        block and returns:
            BlockAction.STOP      halt, each_block returns False
            Replace(value)        store value with set_block semantics
            BlockAction.CONTINUE  (or None) leave the block unchanged

        Returns True if all blocks were visited.
        """
        for index in range(self._block_count):
            result = visitor(self.get_block(index), index)
            if result is None or result is BlockAction.CONTINUE:
                continue
            if result is BlockAction.STOP:
                return False
            if isinstance(result, Replace):
                self.set_block(index, result.value)
                continue
            raise TypeError(
                f"Block visitor must return BlockAction, Replace or None, got {type(result).__name__}"
            )
        return True

    # --- ranges ---

    def set_range(self, start: int, end: int) -> bool:
        """Set every bit in [start, end], both inclusive.

        Returns True if at least one bit changed from 0 to 1. An inverted
        range (start > end) is a no-op and returns False.
        """
        self._check_position(start)
        self._check_position(end)
        if start > end:
            return False
        if start == end:
            return self.set(start)

        width = self._width
        start_mask = from_mask(block_offset(start, width), width)
        end_mask = to_mask(block_offset(end, width))
        first = block_index(start, width)
        last = block_index(end, width)

        # 1. Both ends in one block
        if first == last:
            return self._or_block(first, start_mask & end_mask)

        # 2. Partial start and end blocks
        changed = self._or_block(first, start_mask)
        changed = self._or_block(last, end_mask) or changed

        # 3. Fully covered blocks in between
        for index in range(first + 1, last):
            changed = self._or_block(index, self._full_mask) or changed
        return changed

    def _or_block(self, index: int, mask: int) -> bool:
        block = self._store.read_block(index)
        update = block | mask
        if update == block:
            return False
        self._store.write_block(index, update)
        return True

    # --- inspection ---

    def count(self) -> int:
        """Number of set bits."""
        return sum(popcount(self.get_block(i)) for i in range(self._block_count))

    def positions(self) -> Iterator[int]:
        """Yield the positions of set bits in ascending order."""
        for index in range(self._block_count):
            block = self.get_block(index)
            base = index * self._width
            while block:
                low = block & -block
                yield base + low.bit_length() - 1
                block ^= low

    # --- copying ---

    def copy(self) -> "BitVector":
        """Independent copy of the same type over a duplicated store."""
        clone = type(self).__new__(type(self))
        clone.__dict__.update(self.__dict__)
        clone._store = self._store.duplicate()
        return clone

    def __copy__(self) -> "BitVector":
        return self.copy()

    def __deepcopy__(self, memo) -> "BitVector":
        return self.copy()

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} bits={self._bit_length} "
            f"store={type(self._store).__name__}>"
        )
