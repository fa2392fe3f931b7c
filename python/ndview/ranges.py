"""Axis-aligned N-dimensional ranges and their coordinate iterators."""

import math
from dataclasses import dataclass
from typing import Iterator, Sequence

from .errors import InvalidRangeError
from .index_tricks import shape_from_bounds


@dataclass(frozen=True)
class Range:
    """Box ``[start, stop)`` with a per-axis ``step``.

    Axis 0 is the outermost axis, axis ``ndim - 1`` varies fastest when
    iterating. An axis with ``start == stop`` makes the whole range empty.

    Raises
    ------
    InvalidRangeError
        If the bounds have different arities, the arity is 0, any value is
        negative, any step is below 1, or any ``stop < start``.
    """

    start: tuple[int, ...]
    stop: tuple[int, ...]
    step: tuple[int, ...]

    def __init__(
        self,
        start: Sequence[int],
        stop: Sequence[int],
        step: Sequence[int] | None = None,
    ) -> None:
        start = tuple(int(x) for x in start)
        stop = tuple(int(x) for x in stop)
        step = (1,) * len(start) if step is None else tuple(int(x) for x in step)

        if not len(start) == len(stop) == len(step):
            raise InvalidRangeError(
                f"start {start}, stop {stop} and step {step} must have the same arity"
            )
        if len(start) == 0:
            raise InvalidRangeError("Range needs at least one axis")
        if any(x < 0 for x in start + stop):
            raise InvalidRangeError(f"negative bounds in start {start}, stop {stop}")
        if any(s < 1 for s in step):
            raise InvalidRangeError(f"step {step} must be at least 1 on every axis")
        if any(b < a for a, b in zip(start, stop)):
            raise InvalidRangeError(f"stop {stop} is below start {start}")

        object.__setattr__(self, "start", start)
        object.__setattr__(self, "stop", stop)
        object.__setattr__(self, "step", step)

    @classmethod
    def full(cls, shape: Sequence[int]) -> "Range":
        """Range covering every element of ``shape``."""
        return cls((0,) * len(shape), tuple(shape))

    @staticmethod
    def process_slice(sl: slice, dim: int, shape: Sequence[int]) -> slice:
        """Normalize a slice to explicit ``start``, ``stop``, and positive ``step``.

        Parameters
        ----------
        sl : slice
            Original slice.
        dim : int
            Dimension index the slice applies to (used for defaults).
        shape : sequence of int
            Shape the slice is taken against.

        Returns
        -------
        slice
            Normalized slice with all fields set.
        """
        start, stop, step = sl.start, sl.stop, sl.step
        if start is None:
            start = 0
        if start < 0:
            start = shape[dim] + start
        if stop is None:
            stop = shape[dim]
        if stop < 0:
            stop = shape[dim] + stop
        if step is None:
            step = 1
        return slice(start, stop, step)

    @classmethod
    def from_slices(
        cls, shape: Sequence[int], idxs: int | slice | tuple[int | slice, ...]
    ) -> "Range":
        """Build a Range from ``int``/``slice`` index notation against ``shape``.

        An integer ``i`` selects ``slice(i, i + 1)``; the axis is kept.
        """
        # handle singleton as tuple, everything as slices
        if not isinstance(idxs, tuple):
            idxs = (idxs,)
        if len(idxs) != len(shape):
            raise InvalidRangeError(
                f"need {len(shape)} indexes for shape {tuple(shape)}, got {len(idxs)}"
            )
        slices = [
            cls.process_slice(s, i, shape) if isinstance(s, slice) else slice(s, s + 1, 1)
            for i, s in enumerate(idxs)
        ]
        return cls(
            [s.start for s in slices],
            [s.stop for s in slices],
            [s.step for s in slices],
        )

    @property
    def ndim(self) -> int:
        return len(self.start)

    @property
    def shape(self) -> tuple[int, ...]:
        """Extent of the bounding box, ``stop - start``, ignoring ``step``."""
        return shape_from_bounds(self.start, self.stop)

    @property
    def size(self) -> int:
        """Number of coordinates produced when iterating."""
        return math.prod(
            (b - a + s - 1) // s for a, b, s in zip(self.start, self.stop, self.step)
        )

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> "RangeIterator":
        return RangeIterator(self)


class RangeIterator(Iterator[tuple[int, ...]]):
    """Odometer over the coordinates of a :class:`Range` in row-major order.

    Once exhausted it stays exhausted; iterate the Range again for a fresh
    cursor.
    """

    range: Range
    shape: tuple[int, ...]
    curr: list[int]

    def __init__(self, region: Range) -> None:
        self.range = region
        self.shape = region.shape
        self.curr = list(region.start)
        self._done = 0 in self.shape

    def __iter__(self) -> "RangeIterator":
        return self

    def __next__(self) -> tuple[int, ...]:
        start, stop, step = self.range.start, self.range.stop, self.range.step
        if self._done or self.curr[0] >= stop[0]:
            self._done = True
            raise StopIteration
        prev = tuple(self.curr)

        for i in reversed(range(len(self.curr))):
            self.curr[i] += step[i]
            if i > 0 and self.curr[i] >= stop[i]:
                self.curr[i] = start[i]
            else:
                break

        return prev
