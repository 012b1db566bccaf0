from .base import BlockAction, LengthMismatchError, Replace
from .vector import BitVector


def _keep_going(ok: bool) -> BlockAction:
    return BlockAction.CONTINUE if ok else BlockAction.STOP


class BitSet(BitVector):
    """Dense set of integers in [0, bit_length) with block-wise set algebra.

    Every binary operation requires both operands to have the same bit length.
    The plain methods (union, intersect, subtract, complement) return a new
    set; the ``*_update`` methods change this set in place and return it.
    """

    def _check_length(self, other: BitVector):
        if self.bit_length != other.bit_length:
            raise LengthMismatchError(
                f"Bit length mismatch: {self.bit_length} != {other.bit_length}"
            )
        # blocks are combined index by index, so both sides must be cut the same way
        if self.block_width != other.block_width:
            raise LengthMismatchError(
                f"Block width mismatch: {self.block_width} != {other.block_width}"
            )

    # --- predicates ---

    def is_empty(self) -> bool:
        return self.each_block(lambda block, i: _keep_going(block == 0))

    def is_disjoint(self, other: BitVector) -> bool:
        """True if the sets have no element in common."""
        self._check_length(other)
        return self.each_block(
            lambda block, i: _keep_going(block & other.get_block(i) == 0)
        )

    def contains(self, other: BitVector) -> bool:
        """True if every element of other is also in this set."""
        self._check_length(other)

        def visit(block: int, index: int) -> BlockAction:
            theirs = other.get_block(index)
            return _keep_going(theirs ^ (theirs & block) == 0)

        return self.each_block(visit)

    def equals(self, other: BitVector) -> bool:
        self._check_length(other)
        return self.each_block(
            lambda block, i: _keep_going(block == other.get_block(i))
        )

    # --- in-place combinators ---

    def union_update(self, other: BitVector) -> "BitSet":
        self._check_length(other)
        self.each_block(lambda block, i: Replace(block | other.get_block(i)))
        return self

    def intersect_update(self, other: BitVector) -> "BitSet":
        self._check_length(other)
        self.each_block(lambda block, i: Replace(block & other.get_block(i)))
        return self

    def subtract_update(self, other: BitVector) -> "BitSet":
        self._check_length(other)
        self.each_block(
            lambda block, i: Replace(block ^ (block & other.get_block(i)))
        )
        return self

    def complement_update(self) -> "BitSet":
        # set_block masks ~block to the block width and drops the unused tail bits
        self.each_block(lambda block, i: Replace(~block))
        return self

    # --- pure combinators ---

    def union(self, other: BitVector) -> "BitSet":
        self._check_length(other)
        return self.copy().union_update(other)

    def intersect(self, other: BitVector) -> "BitSet":
        self._check_length(other)
        return self.copy().intersect_update(other)

    def subtract(self, other: BitVector) -> "BitSet":
        self._check_length(other)
        return self.copy().subtract_update(other)

    def complement(self) -> "BitSet":
        return self.copy().complement_update()

    # --- operators ---

    def __or__(self, other):
        if not isinstance(other, BitSet):
            return NotImplemented
        return self.union(other)

    def __and__(self, other):
        if not isinstance(other, BitSet):
            return NotImplemented
        return self.intersect(other)

    def __sub__(self, other):
        if not isinstance(other, BitSet):
            return NotImplemented
        return self.subtract(other)

    def __invert__(self):
        return self.complement()

    def __ior__(self, other):
        if not isinstance(other, BitSet):
            return NotImplemented
        return self.union_update(other)

    def __iand__(self, other):
        if not isinstance(other, BitSet):
            return NotImplemented
        return self.intersect_update(other)

    def __isub__(self, other):
        if not isinstance(other, BitSet):
            return NotImplemented
        return self.subtract_update(other)

    def __le__(self, other):
        if not isinstance(other, BitSet):
            return NotImplemented
        return other.contains(self)

    def __ge__(self, other):
        if not isinstance(other, BitSet):
            return NotImplemented
        return self.contains(other)

    def __eq__(self, other):
        if not isinstance(other, BitSet):
            return NotImplemented
        if self.bit_length != other.bit_length:
            return False
        if self.block_width != other.block_width:
            return list(self.positions()) == list(other.positions())
        return self.equals(other)

    __hash__ = None
