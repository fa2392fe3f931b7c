"""Row-major index arithmetic.

Pure functions over shapes, coordinates and strides. All three are plain
``tuple[int, ...]`` of the same arity; which one a tuple is depends only on
where it is used.
"""

import math
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .ranges import Range


def size_of(shape: Sequence[int]) -> int:
    """Number of elements addressed by ``shape`` (1 for arity 0)."""
    return math.prod(shape)


def compute_strides(shape: Sequence[int]) -> tuple[int, ...]:
    """Compute compact (row-major) strides for a shape.

    Parameters
    ----------
    shape : sequence of int
        Target shape.

    Returns
    -------
    tuple of int
        ``strides[i] == prod(shape[i + 1:])``; the last axis has stride 1.
    """
    stride = 1
    strides = []
    for i in range(len(shape) - 1, -1, -1):
        strides.append(stride)
        stride *= shape[i]
    return tuple(reversed(strides))


def ravel_index(index: Sequence[int], strides: Sequence[int]) -> int:
    """Flat buffer offset of ``index`` under ``strides``."""
    assert len(index) == len(strides), "index and strides must have the same arity"
    return sum(i * s for i, s in zip(index, strides))


def unravel_index(index: int, strides: Sequence[int]) -> tuple[int, ...]:
    """Inverse of :func:`ravel_index` for canonical strides.

    Parameters
    ----------
    index : int
        Flat offset.
    strides : sequence of int
        Strides produced by :func:`compute_strides`. Arbitrary strides do not
        have a unique decoding and give meaningless results.

    Returns
    -------
    tuple of int
        The coordinate whose flat offset is ``index``.
    """
    out = []
    for stride in strides:
        if stride == 0:
            # only reachable for shapes with a zero extent after this axis
            out.append(0)
            continue
        coord, index = divmod(index, stride)
        out.append(coord)
    return tuple(out)


def shape_from_bounds(start: Sequence[int], stop: Sequence[int]) -> tuple[int, ...]:
    """Per-axis extent ``stop - start``."""
    assert len(start) == len(stop), "start and stop must have the same arity"
    return tuple(b - a for a, b in zip(start, stop))


def check_bounds(shape: Sequence[int], index: Sequence[int]) -> None:
    """Raise ``IndexError`` unless ``index`` addresses an element of ``shape``."""
    if len(shape) != len(index):
        raise IndexError(
            f"index {tuple(index)} has arity {len(index)}, "
            f"expected {len(shape)} for shape {tuple(shape)}"
        )
    for x, s in zip(index, shape):
        if x < 0 or x >= s:
            raise IndexError(f"index {tuple(index)} out of range for shape {tuple(shape)}")


def is_contiguous(region: "Range", shape: Sequence[int]) -> bool:
    """Return whether ``region`` selects one unbroken run of flat offsets.

    Any step other than 1 leaves gaps. Otherwise, scanning from the innermost
    axis outward, axes must be fully selected up to the first partially
    selected one, and every axis outside that one must select a single
    position. Empty regions are trivially contiguous.

    Parameters
    ----------
    region : Range
        Requested region.
    shape : sequence of int
        Shape of the array the region is taken from.

    Returns
    -------
    bool
        True if the region occupies consecutive flat offsets.
    """
    assert region.ndim == len(shape), "region and shape must have the same arity"
    if any(s != 1 for s in region.step):
        return False

    sub_shape = shape_from_bounds(region.start, region.stop)
    if 0 in sub_shape:
        return True

    axis = len(shape) - 1
    while axis >= 0 and sub_shape[axis] == shape[axis]:
        axis -= 1
    if axis < 0:
        return True
    # axes outward of the first partial one may only pick a single slab
    return all(extent == 1 for extent in sub_shape[:axis])
