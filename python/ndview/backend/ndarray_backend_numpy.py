from typing import Any, Sequence

import numpy as np

__device_name__ = "numpy"
_dtype = np.float64


class Array:
    def __init__(self, size: int, dtype: Any = None):
        # use numpy array as buffer to store the data
        self.buffer = np.empty(size, dtype=_dtype if dtype is None else dtype)

    @property
    def size(self) -> int:
        return self.buffer.size

    @property
    def dtype(self) -> np.dtype:
        return self.buffer.dtype

    def ptr(self) -> int:
        return self.buffer.ctypes.data


def to_numpy(a: Array, shape: tuple[int, ...], offset: int) -> np.ndarray:
    """Create a read-only NumPy view of a contiguous window of ``a.buffer``.

    Parameters
    ----------
    a : Array
        Source storage.
    shape : tuple of int
        Shape of the returned view; the window holds ``prod(shape)`` elements.
    offset : int
        Starting element offset into ``a.buffer``.

    Returns
    -------
    numpy.ndarray
        A view (no copy) sharing memory with ``a.buffer``.
    """
    size = int(np.prod(shape, dtype=np.int64))
    out = a.buffer[offset : offset + size].reshape(shape)
    out.flags.writeable = False
    return out


def from_numpy(numpy_array: np.ndarray, out: Array) -> None:
    """Copy values from an arbitrary NumPy array into ``out.buffer``.

    Values are copied in row-major (C-order) via ``numpy_array.flat``.
    A ``ValueError`` will be raised by NumPy if sizes are incompatible.
    """
    out.buffer[:] = numpy_array.flat


def fill(out: Array, val: Any) -> None:
    """Fill the entire ``out.buffer`` with a scalar value."""
    out.buffer.fill(val)


def getitem(a: Array, offset: int) -> Any:
    return a.buffer[offset]


def setitem(a: Array, offset: int, val: Any) -> None:
    a.buffer[offset] = val


def gather(a: Array, out: Array, offsets: Sequence[int]) -> None:
    """Copy ``a.buffer[offsets[k]]`` into ``out.buffer[k]`` for every ``k``.

    Parameters
    ----------
    a : Array
        Source storage.
    out : Array
        Destination storage with at least ``len(offsets)`` elements. Positions
        past ``len(offsets)`` are left untouched.
    offsets : sequence of int
        Flat source offsets in the order they are to be written.
    """
    if len(offsets) == 0:
        return
    out.buffer[: len(offsets)] = a.buffer[np.asarray(offsets, dtype=np.intp)]
