"""
Unit tests for BitArray.
"""

import pytest

from registry_sync.matching.bit_array import BitArray


class TestBitArray:
    """Test cases for BitArray."""

    def test_new_array_has_no_bits_set(self):
        bits = BitArray(5)

        assert len(bits) == 5
        assert bits.none_set
        assert not bits.all_set
        assert bits.set_count == 0
        assert list(bits.unset_indices()) == [0, 1, 2, 3, 4]

    def test_set_and_clear(self):
        bits = BitArray(4)
        bits.set(2)

        assert bits.is_set(2)
        assert not bits.is_set(1)
        assert list(bits.set_indices()) == [2]

        bits.clear(2)
        assert bits.none_set

    def test_all_set_of(self):
        bits = BitArray.all_set_of(3)

        assert bits.all_set
        assert bits.set_count == 3
        assert bits.first_unset() == -1

    def test_empty_array_is_all_set(self):
        """An empty array has no free index."""
        bits = BitArray(0)

        assert bits.all_set
        assert bits.first_unset() == -1
        assert list(bits.unset_indices()) == []

    @pytest.mark.parametrize("index", [-1, 4, 100])
    def test_out_of_range_index_raises(self, index):
        bits = BitArray(4)

        with pytest.raises(IndexError):
            bits.set(index)
        with pytest.raises(IndexError):
            bits.is_set(index)

    def test_unset_searches(self):
        bits = BitArray(6)
        for index in (0, 1, 3):
            bits.set(index)

        assert bits.first_unset() == 2
        assert bits.unset_at_or_after(2) == 2
        assert bits.unset_after(2) == 4
        assert bits.unset_after(5) == -1
        assert bits.unset_at_or_after(-1) == 2

    def test_set_after(self):
        bits = BitArray(6)
        bits.set(1)
        bits.set(4)

        assert bits.set_after(-1) == 1
        assert bits.set_after(1) == 4
        assert bits.set_after(4) == -1

    def test_copy_is_independent(self):
        bits = BitArray(3)
        copied = bits.copy()
        copied.set(0)

        assert bits.none_set
        assert copied != bits
        assert copied == BitArray(3, 0b001)

    def test_bits_must_fit_length(self):
        with pytest.raises(ValueError):
            BitArray(2, 0b100)
        with pytest.raises(ValueError):
            BitArray(-1)
