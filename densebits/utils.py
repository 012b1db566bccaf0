def blocks_for_bits(bit_length: int, block_width: int) -> int:
    """Minimum number of blocks needed to hold bit_length bits."""
    return (bit_length + block_width - 1) // block_width


def block_index(bit: int, block_width: int) -> int:
    return bit // block_width


def block_offset(bit: int, block_width: int) -> int:
    return bit % block_width


def full_mask(block_width: int) -> int:
    """All bits of one block set."""
    return (1 << block_width) - 1


def from_mask(offset: int, block_width: int) -> int:
    """Bits at or above offset, confined to one block.

    offset 4, width 8 -> 0b11110000
    """
    return full_mask(block_width) ^ ((1 << offset) - 1)


def to_mask(offset: int) -> int:
    """Bits at or below offset.

    offset 4 -> 0b00011111
    """
    return (1 << (offset + 1)) - 1


def tail_mask(bit_length: int, block_width: int) -> int:
    """Valid bits of the last block, or the full mask when it is completely used."""
    used = bit_length % block_width
    if used == 0:
        return full_mask(block_width)
    return (1 << used) - 1


def popcount(block: int) -> int:
    count = 0
    n = block
    while n:
        n &= n - 1
        count += 1
    return count
