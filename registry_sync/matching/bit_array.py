"""
Fixed-length bit vector.

Used by the pairing engine to track which indices of each side have been
consumed. Bits live in a single Python int; bit i corresponds to index i.
"""

from typing import Iterator


class BitArray:
    """
    Index-addressed bit vector of fixed length.

    Examples:
        >>> bits = BitArray(4)
        >>> bits.set(1)
        >>> list(bits.unset_indices())
        [0, 2, 3]
        >>> bits.unset_after(1)
        2
    """

    __slots__ = ("_bits", "_length")

    def __init__(self, length: int, bits: int = 0):
        if length < 0:
            raise ValueError(f"Length must not be negative, got {length}")
        if bits < 0 or bits >> length:
            raise ValueError(f"Bits {bits:#x} do not fit in length {length}")
        self._length = length
        self._bits = bits

    @classmethod
    def all_set_of(cls, length: int) -> 'BitArray':
        return cls(length, (1 << length) - 1)

    def __len__(self) -> int:
        return self._length

    @property
    def length(self) -> int:
        return self._length

    @property
    def _mask(self) -> int:
        return (1 << self._length) - 1

    def _check_index(self, index: int):
        if not 0 <= index < self._length:
            raise IndexError(
                f"Bit index {index} out of range for length {self._length}"
            )

    def set(self, index: int, value: bool = True):
        self._check_index(index)
        if value:
            self._bits |= 1 << index
        else:
            self._bits &= ~(1 << index)

    def clear(self, index: int):
        self.set(index, False)

    def is_set(self, index: int) -> bool:
        self._check_index(index)
        return (self._bits >> index) & 1 == 1

    @property
    def set_count(self) -> int:
        return bin(self._bits).count("1")

    @property
    def all_set(self) -> bool:
        return self._bits == self._mask

    @property
    def none_set(self) -> bool:
        return self._bits == 0

    def unset_at_or_after(self, index: int) -> int:
        """
        Find the lowest unset index >= index.

        Args:
            index: Start position; negative values start from 0

        Returns:
            The index, or -1 if there is none
        """
        start = max(index, 0)
        if start >= self._length:
            return -1
        free = (~self._bits & self._mask) >> start
        if free == 0:
            return -1
        return start + _lowest_bit(free)

    def unset_after(self, index: int) -> int:
        """Find the lowest unset index > index, or -1."""
        return self.unset_at_or_after(index + 1)

    def set_after(self, index: int) -> int:
        """Find the lowest set index > index, or -1."""
        start = max(index + 1, 0)
        if start >= self._length:
            return -1
        taken = self._bits >> start
        if taken == 0:
            return -1
        return start + _lowest_bit(taken)

    def first_unset(self) -> int:
        """Find the lowest unset index, or -1."""
        return self.unset_at_or_after(0)

    def unset_indices(self) -> Iterator[int]:
        """Yield unset indices, low to high."""
        return _iter_bits(~self._bits & self._mask)

    def set_indices(self) -> Iterator[int]:
        """Yield set indices, low to high."""
        return _iter_bits(self._bits)

    def copy(self) -> 'BitArray':
        return BitArray(self._length, self._bits)

    def __eq__(self, other) -> bool:
        if not isinstance(other, BitArray):
            return NotImplemented
        return self._length == other._length and self._bits == other._bits

    def __repr__(self) -> str:
        return f"BitArray(length={self._length}, bits={self._bits:#b})"


def _lowest_bit(value: int) -> int:
    return (value & -value).bit_length() - 1


def _iter_bits(value: int) -> Iterator[int]:
    while value:
        index = _lowest_bit(value)
        yield index
        value &= value - 1
