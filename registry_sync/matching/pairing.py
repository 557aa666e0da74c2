"""
Pairing engine.

Enumerates every still-available (left, right) pair of two ordered
collections and lets the caller consume one left and one right index at a
time. Enumeration is live: it re-reads availability on every step, so a
consume() issued while an enumeration is suspended changes the pairs that
enumeration produces from then on.
"""

from dataclasses import dataclass
from typing import Generic, Iterator, Sequence, TypeVar

from .bit_array import BitArray


L = TypeVar('L')
R = TypeVar('R')


class AlreadyConsumedError(ValueError):
    """Raised when consuming an index that was already consumed."""
    pass


@dataclass(frozen=True)
class PotentialMapping(Generic[L, R]):
    """A pair of currently available indices and the items they point to."""

    left_index: int
    right_index: int
    left: L
    right: R


class PairingEngine(Generic[L, R]):
    """
    Live, restartable pair enumeration with consumption.

    Pairs are produced ordered by left index, then right index. Each call to
    enumerate() starts a fresh traversal from the smallest available indices.
    The engine holds no lock; drive one instance from one thread.

    Examples:
        >>> engine = PairingEngine(["a", "b"], ["x", "y"])
        >>> pairs = engine.enumerate()
        >>> first = next(pairs)
        >>> first.left_index, first.right, first.right_index
        (0, 'x', 0)
        >>> engine.consume(0, 0)
        >>> next(pairs).left
        'b'
    """

    def __init__(self, left: Sequence[L], right: Sequence[R]):
        self._left = left
        self._right = right
        # A set bit means the index has been consumed.
        self._left_used = BitArray(len(left))
        self._right_used = BitArray(len(right))

    @property
    def left(self) -> Sequence[L]:
        return self._left

    @property
    def right(self) -> Sequence[R]:
        return self._right

    def is_left_available(self, index: int) -> bool:
        return not self._left_used.is_set(index)

    def is_right_available(self, index: int) -> bool:
        return not self._right_used.is_set(index)

    def available_left_indices(self) -> Iterator[int]:
        return self._left_used.unset_indices()

    def available_right_indices(self) -> Iterator[int]:
        return self._right_used.unset_indices()

    def consume(self, left_index: int, right_index: int):
        """
        Remove one left and one right index from all future pairs.

        The two indices need not have been enumerated together.

        Args:
            left_index: Index into the left collection
            right_index: Index into the right collection

        Raises:
            IndexError: If either index is out of range
            AlreadyConsumedError: If either index was consumed before
        """
        if self._left_used.is_set(left_index):
            raise AlreadyConsumedError(f"Left index {left_index} already consumed")
        if self._right_used.is_set(right_index):
            raise AlreadyConsumedError(f"Right index {right_index} already consumed")

        self._left_used.set(left_index)
        self._right_used.set(right_index)

    def enumerate(self) -> Iterator[PotentialMapping[L, R]]:
        """
        Lazily yield all available pairs.

        Availability is checked again before producing each pair. If the
        current left index is consumed while the generator is suspended, the
        rest of its row is skipped and the traversal resumes at the next
        available left index.

        Yields:
            PotentialMapping for each available pair
        """
        left_index = -1
        right_index = -1

        while True:
            current_left = self._left_used.unset_at_or_after(left_index)
            if current_left == -1 or self._right_used.all_set:
                return

            if current_left != left_index:
                # First step, or the previous left index was consumed.
                left_index = current_left
                right_index = self._right_used.first_unset()
            else:
                next_right = self._right_used.unset_after(right_index)
                if next_right == -1:
                    left_index = self._left_used.unset_after(left_index)
                    if left_index == -1:
                        return
                    right_index = self._right_used.first_unset()
                else:
                    right_index = next_right

            yield PotentialMapping(
                left_index,
                right_index,
                self._left[left_index],
                self._right[right_index],
            )

    def __iter__(self) -> Iterator[PotentialMapping[L, R]]:
        return self.enumerate()
