import copy
import unittest

from densebits import (
    MEDIA,
    BitVector,
    BlockAction,
    BytesBlockStore,
    OutOfRangeError,
    Replace,
    allocate_store,
    create_bitvector,
)


class TestBitVectorBits(unittest.TestCase):
    def test_set_test_unset(self):
        for medium in MEDIA:
            with self.subTest(medium=medium):
                vector = create_bitvector(100, medium)
                for pos in (0, 7, 8, 63, 64, 99):
                    self.assertFalse(vector.test(pos))
                    self.assertTrue(vector.set(pos))
                    self.assertTrue(vector.test(pos))
                    self.assertFalse(vector.set(pos))
                    self.assertTrue(vector.unset(pos))
                    self.assertFalse(vector.test(pos))
                    self.assertFalse(vector.unset(pos))

    def test_set_leaves_neighbours_alone(self):
        vector = create_bitvector(16, "bytes")
        vector.set(7)
        vector.set(8)
        self.assertEqual(vector.get_block(0), 0b10000000)
        self.assertEqual(vector.get_block(1), 0b00000001)
        self.assertEqual(list(vector.positions()), [7, 8])

    def test_out_of_range_positions(self):
        for medium in MEDIA:
            with self.subTest(medium=medium):
                vector = create_bitvector(10, medium)
                for pos in (-1, 10, 64, 1000):
                    with self.assertRaises(OutOfRangeError):
                        vector.set(pos)
                    with self.assertRaises(OutOfRangeError):
                        vector.unset(pos)
                    with self.assertRaises(OutOfRangeError):
                        vector.test(pos)
                self.assertEqual(vector.count(), 0)

    def test_out_of_range_is_index_error(self):
        vector = BitVector(1)
        with self.assertRaises(IndexError):
            vector.test(1)

    def test_zero_length(self):
        vector = BitVector(0)
        self.assertEqual(vector.block_count, 0)
        self.assertTrue(vector.each_block(lambda block, i: BlockAction.STOP))
        with self.assertRaises(OutOfRangeError):
            vector.set(0)


class TestBitVectorConstruction(unittest.TestCase):
    def test_default_store(self):
        vector = BitVector(130)
        self.assertEqual(vector.bit_length, 130)
        self.assertEqual(vector.block_width, 64)
        self.assertEqual(vector.block_count, 3)

    def test_negative_length(self):
        with self.assertRaises(ValueError):
            BitVector(-1)

    def test_insufficient_store(self):
        with self.assertRaises(ValueError):
            BitVector(17, BytesBlockStore(2))

    def test_larger_store_exposes_only_needed_blocks(self):
        vector = BitVector(9, BytesBlockStore(5))
        self.assertEqual(vector.block_count, 2)
        with self.assertRaises(OutOfRangeError):
            vector.get_block(2)


class TestBitVectorBlocks(unittest.TestCase):
    def test_tail_mask_on_read(self):
        for medium in MEDIA:
            with self.subTest(medium=medium):
                vector = create_bitvector(130, medium)
                width = vector.block_width
                last = vector.block_count - 1
                # bypass the vector and dirty the unused high bits directly
                vector.store.write_block(last, (1 << width) - 1)
                valid = 130 % width
                self.assertEqual(vector.get_block(last), (1 << valid) - 1)

    def test_tail_mask_on_write(self):
        for medium in MEDIA:
            with self.subTest(medium=medium):
                vector = create_bitvector(130, medium)
                width = vector.block_width
                last = vector.block_count - 1
                ones = (1 << width) - 1
                self.assertTrue(vector.set_block(last, ones))
                self.assertEqual(vector.get_block(last), (1 << (130 % width)) - 1)
                self.assertEqual(vector.store.read_block(last), (1 << (130 % width)) - 1)
                # tail already full
                self.assertFalse(vector.set_block(last, ones))

    def test_full_last_block_is_not_masked(self):
        vector = create_bitvector(16, "bytes")
        self.assertTrue(vector.set_block(1, 0xFF))
        self.assertEqual(vector.get_block(1), 0xFF)

    def test_set_block_change_detection(self):
        vector = BitVector(128)
        self.assertFalse(vector.set_block(0, 0))
        self.assertTrue(vector.set_block(0, 5))
        self.assertFalse(vector.set_block(0, 5))
        self.assertTrue(vector.test(0))
        self.assertTrue(vector.test(2))

    def test_set_block_accepts_negative_as_twos_complement(self):
        vector = create_bitvector(8, "bytes")
        self.assertTrue(vector.set_block(0, ~0b1))
        self.assertEqual(vector.get_block(0), 0b11111110)

    def test_block_index_out_of_range(self):
        vector = BitVector(64)
        for index in (-1, 1):
            with self.assertRaises(OutOfRangeError):
                vector.get_block(index)
            with self.assertRaises(OutOfRangeError):
                vector.set_block(index, 1)


class TestEachBlock(unittest.TestCase):
    def test_visits_in_order(self):
        vector = create_bitvector(32, "bytes")
        seen = []
        self.assertTrue(vector.each_block(lambda block, i: seen.append(i)))
        self.assertEqual(seen, [0, 1, 2, 3])

    def test_stop(self):
        vector = create_bitvector(32, "bytes")
        seen = []

        def visit(block, index):
            seen.append(index)
            return BlockAction.STOP if index == 1 else BlockAction.CONTINUE

        self.assertFalse(vector.each_block(visit))
        self.assertEqual(seen, [0, 1])

    def test_replace_is_tail_masked(self):
        vector = create_bitvector(12, "bytes")
        self.assertTrue(vector.each_block(lambda block, i: Replace(0xFF)))
        self.assertEqual(vector.get_block(0), 0xFF)
        self.assertEqual(vector.get_block(1), 0x0F)
        self.assertEqual(vector.count(), 12)

    def test_bad_visitor_result(self):
        vector = create_bitvector(8, "bytes")
        with self.assertRaises(TypeError):
            vector.each_block(lambda block, i: 3)


class TestBitVectorCopy(unittest.TestCase):
    def test_copy_is_independent(self):
        for medium in MEDIA:
            with self.subTest(medium=medium):
                vector = create_bitvector(70, medium)
                vector.set(3)
                for clone in (vector.copy(), copy.copy(vector), copy.deepcopy(vector)):
                    self.assertIsNot(clone, vector)
                    self.assertIsNot(clone.store, vector.store)
                    self.assertEqual(type(clone.store), type(vector.store))
                    self.assertTrue(clone.test(3))
                    clone.set(69)
                    self.assertFalse(vector.test(69))
                vector.unset(3)
                self.assertFalse(vector.test(3))

    def test_count_and_positions(self):
        vector = BitVector(200, allocate_store(200, "buffer"))
        for pos in (199, 0, 64, 65, 127):
            vector.set(pos)
        self.assertEqual(vector.count(), 5)
        self.assertEqual(list(vector.positions()), [0, 64, 65, 127, 199])

    def test_repr(self):
        self.assertEqual(repr(create_bitvector(9, "bytes")), "<BitVector bits=9 store=BytesBlockStore>")


if __name__ == "__main__":
    unittest.main()
