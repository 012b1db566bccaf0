from dataclasses import dataclass
from enum import Enum


class BitSetError(Exception):
    """Base class for all densebits errors."""


class OutOfRangeError(BitSetError, IndexError):
    """A bit position, block index or range endpoint is outside valid bounds."""


class LengthMismatchError(OutOfRangeError):
    """Operands of a binary set operation have different bit lengths."""


class BlockAction(Enum):
    """Control results for an each_block visitor."""
    CONTINUE = "continue"
    STOP = "stop"


@dataclass(frozen=True)
class Replace:
    """Visitor result asking each_block to store a new value for the block."""
    value: int
