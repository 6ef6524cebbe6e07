"""
Lazy Cartesian Product Iterators.

Enumerate or sample points of a multi-dimensional, mixed-type grid without
materializing the cross product. A combination is addressed by its index in
mixed-radix counting order, where dimension 0 is the most significant digit
and the last dimension varies fastest.

Key Components:
    ``CartesianProductIterator``: visits all ``T = prod(size(d))``
        combinations once, in ascending index order.
    ``RandomizedProductIterator``: visits ``count`` sampled combinations
        (distinct unless repeats are allowed), in ascending index order.

Both keep one private cursor (``_multi_index``) that starts at the implicit
pre-start position, where every digit sits at ``size - 1``, so that a single
step lands on combination 0. Advancing by an arbitrary offset is done by
carry propagation from the last dimension upwards.

Example:
    >>> it = CartesianProductIterator([[32, 64], ["Uniform"], ["Min"], [4, 6, 8]])
    >>> it.advance()
    (32, 'Uniform', 'Min', 4)
    >>> len(it)
    6
"""

from __future__ import annotations

from typing import Generic, Iterator, Sequence, TypeVar

import numpy as np

from ..exceptions import GridTooLargeError, InvalidCountError, InvalidGridError

T = TypeVar("T")

# Combination counts must stay representable in 63 bits
MAX_TOTAL_COUNT = 2**63

# Above this requested share of the grid, sampling shuffles the full index
# range instead of rejection-sampling distinct indices
SHUFFLE_FRACTION_THRESHOLD = 0.7


class ProductIteratorBase(Generic[T]):
    """
    Shared cursor state and skip-by-offset logic for product iterators.

    Args:
        value_sets: Ordered, indexable, non-empty value sets (one per dimension).

    Raises:
        InvalidGridError: If there are no dimensions or a value set is empty.
        GridTooLargeError: If the combination count does not fit into 63 bits.
    """

    def __init__(self, value_sets: Sequence[Sequence[T]]) -> None:
        if len(value_sets) == 0:
            raise InvalidGridError("Parameter grid should have at least one dimension")

        total = 1
        for idx, values in enumerate(value_sets):
            if len(values) == 0:
                raise InvalidGridError(f"Set of values for dimension {idx} should not be empty")
            total *= len(values)
            if total >= MAX_TOTAL_COUNT:
                raise GridTooLargeError("The parameter grid is too large. Try to reduce it.")

        self._sets: tuple[tuple[T, ...], ...] = tuple(tuple(values) for values in value_sets)
        self._sizes: tuple[int, ...] = tuple(len(values) for values in self._sets)
        self._multi_index: list[int] = [size - 1 for size in self._sizes]
        self._grid_count = total
        self._total_count = total
        self._passed_count = 0

    @property
    def grid_count(self) -> int:
        """Number of combinations in the full grid."""
        return self._grid_count

    @property
    def total_count(self) -> int:
        """Number of combinations this iterator produces."""
        return self._total_count

    @property
    def passed_count(self) -> int:
        """Number of combinations produced so far."""
        return self._passed_count

    def __len__(self) -> int:
        return self._total_count

    def __iter__(self) -> Iterator[tuple[T, ...]]:
        return self

    def __next__(self) -> tuple[T, ...]:
        combination = self.advance()
        if combination is None:
            raise StopIteration
        return combination

    def advance(self) -> tuple[T, ...] | None:
        """Return the next combination, or None once the iterator is exhausted."""
        raise NotImplementedError  # pragma: no cover

    def _is_exhausted(self) -> bool:
        return self._passed_count >= self._total_count

    def _next_with_offset(self, offset: int) -> tuple[T, ...]:
        """
        Move the cursor ``offset`` combinations forward and return the new tuple.

        Carry propagates from the last (least significant) dimension upwards;
        dimension 0 wraps without producing a further carry.
        """
        for dim in range(len(self._sizes) - 1, 0, -1):
            size = self._sizes[dim]
            old_digit = self._multi_index[dim]
            self._multi_index[dim] = (old_digit + offset) % size
            if old_digit + offset < size:
                return self._current()
            offset = (offset - (size - old_digit)) // size + 1

        self._multi_index[0] = (self._multi_index[0] + offset) % self._sizes[0]
        return self._current()

    def _current(self) -> tuple[T, ...]:
        return tuple(values[i] for values, i in zip(self._sets, self._multi_index))


class CartesianProductIterator(ProductIteratorBase[T]):
    """
    Exhaustive enumeration of every combination in mixed-radix order.

    The first ``advance()`` returns the combination of each dimension's first
    value; after ``total_count`` calls every further call returns None.
    """

    def advance(self) -> tuple[T, ...] | None:
        if self._is_exhausted():
            return None
        self._passed_count += 1
        return self._next_with_offset(1)


class RandomizedProductIterator(ProductIteratorBase[T]):
    """
    Random sample of ``count`` combinations, produced in ascending index order.

    Sampling policy:
        - ``count > T`` without repeats is clamped to ``T``.
        - If the requested share ``count / T`` exceeds 0.7 and repeats are
          disallowed, the whole index range is shuffled and truncated.
        - Otherwise indices are drawn uniformly from ``[0, T)``, rejecting
          duplicates unless ``allow_repeat`` is set.

    The drawn indices are sorted and stored as successive deltas, so each
    ``advance()`` is a single skip-by-offset step over the grid. With
    ``allow_repeat`` a repeated index is a zero delta and yields the
    previous combination again.

    Args:
        value_sets: Ordered, indexable, non-empty value sets (one per dimension).
        count: Number of combinations to produce (must be positive).
        allow_repeat: Allow the same combination to be drawn more than once.
        seed: Seed (or numpy Generator) for reproducible sampling.

    Raises:
        InvalidCountError: If ``count`` is not positive.
    """

    def __init__(
        self,
        value_sets: Sequence[Sequence[T]],
        count: int,
        allow_repeat: bool = False,
        seed: int | np.random.Generator | None = None,
    ) -> None:
        super().__init__(value_sets)
        if count <= 0:
            raise InvalidCountError(
                f"Number of tries for randomized search should be a positive number, got {count}"
            )

        total = self._grid_count
        if count > total and not allow_repeat:
            count = total

        rng = seed if isinstance(seed, np.random.Generator) else np.random.default_rng(seed)
        indices = self._draw_indices(rng, total, count, allow_repeat)
        indices.sort()

        # Deltas are measured from the pre-start position (index -1)
        self._flat_offsets: list[int] = []
        last_index = -1
        for index in indices:
            self._flat_offsets.append(index - last_index)
            last_index = index
        self._offset_index = 0
        self._total_count = count

    @staticmethod
    def _draw_indices(
        rng: np.random.Generator, total: int, count: int, allow_repeat: bool
    ) -> list[int]:
        if not allow_repeat and count / total > SHUFFLE_FRACTION_THRESHOLD:
            return [int(i) for i in rng.permutation(total)[:count]]

        indices: list[int] = []
        chosen: set[int] = set()
        while len(indices) != count:
            next_index = int(rng.integers(total))
            while next_index in chosen:
                next_index = int(rng.integers(total))
            indices.append(next_index)
            if not allow_repeat:
                chosen.add(next_index)
        return indices

    def advance(self) -> tuple[T, ...] | None:
        if self._is_exhausted():
            return None
        offset = self._flat_offsets[self._offset_index]
        self._offset_index += 1
        self._passed_count += 1
        return self._next_with_offset(offset)
