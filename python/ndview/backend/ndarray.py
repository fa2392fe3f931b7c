import logging
import weakref
from typing import Any, Sequence

import numpy as np

from ..errors import BorrowError, DimensionError, LayoutError
from ..index_tricks import (
    check_bounds,
    compute_strides,
    is_contiguous,
    ravel_index,
    size_of,
)
from ..ranges import Range
from .device import Device, default_device

logger = logging.getLogger(__name__)

Index = int | Sequence[int]


class NDArrayBase:
    """Operations shared by owned arrays and borrowed views.

    Both kinds describe a row-major block of ``prod(shape)`` elements that
    starts at element ``_offset`` of a backend buffer and is laid out with the
    canonical strides of ``shape``. Subclasses decide who owns the buffer and
    whether it may be written.
    """

    _shape: tuple[int, ...]
    _strides: tuple[int, ...]
    _offset: int
    _device: Device

    def _storage(self) -> Any:
        """Return the backend handle holding this array's elements."""
        raise NotImplementedError("Subclasses must implement this method.")

    def _root(self) -> "Array":
        """Return the owned array whose buffer backs this array."""
        raise NotImplementedError("Subclasses must implement this method.")

    def reshape(self, new_shape: Sequence[int]) -> "NDArrayBase":
        raise NotImplementedError("Subclasses must implement this method.")

    ### Properties and string representations
    @property
    def shape(self) -> tuple[int, ...]:
        """tuple[int, ...]: Logical shape of the array."""
        return self._shape

    @property
    def strides(self) -> tuple[int, ...]:
        """tuple[int, ...]: Canonical row-major strides of ``shape``."""
        return self._strides

    @property
    def device(self) -> Device:
        """Device: The device on which this array's storage resides."""
        return self._device

    @property
    def dtype(self) -> str:
        """str: NumPy name of the element type."""
        return str(self._storage().dtype)

    @property
    def ndim(self) -> int:
        """int: Number of dimensions."""
        return len(self._shape)

    @property
    def size(self) -> int:
        """int: Total number of elements as the product of ``shape``."""
        return size_of(self._shape)

    def __str__(self) -> str:
        """Return the nested-bracket rendering of the array contents."""
        from ..formatting import format_array  # lazy to avoid circular import

        return format_array(self)

    def numpy(self) -> np.ndarray:
        """Return a read-only NumPy view of the elements with this shape."""
        return self.device.to_numpy(self._storage(), self._shape, self._offset)

    ### Element access
    def _flat_offset(self, idx: Index) -> int:
        """Bounds-check ``idx`` and return its offset into the backend buffer."""
        coord = (idx,) if isinstance(idx, (int, np.integer)) else tuple(idx)
        check_bounds(self._shape, coord)
        return self._offset + ravel_index(coord, self._strides)

    def __getitem__(self, idx: Index) -> Any:
        """Read the element at coordinate ``idx``.

        Raises
        ------
        IndexError
            If ``idx`` has the wrong arity or lies outside ``shape``.
        """
        return self.device.getitem(self._storage(), self._flat_offset(idx))

    ### Extraction
    def _check_range(self, region: Range) -> None:
        if region.ndim != self.ndim:
            raise IndexError(
                f"Range {region} has arity {region.ndim}, array has shape {self._shape}"
            )
        if any(b > s for b, s in zip(region.stop, self._shape)):
            raise IndexError(f"Range {region} exceeds array of shape {self._shape}")

    def slice(self, region: Range) -> "Array":
        """Copy the elements addressed by ``region`` into a new owned array.

        The result has shape ``region.shape`` (``stop - start``, ignoring
        ``step``). Elements are written in the order the range emits its
        coordinates, one after another from the start of the result's
        buffer. With a step above 1 the range emits fewer coordinates than the
        result holds, and the remaining tail stays zero.

        Parameters
        ----------
        region : Range
            Region to copy. Any positive step is allowed.

        Returns
        -------
        Array
            A freshly allocated array that does not alias ``self``.

        Raises
        ------
        IndexError
            If ``region`` does not fit inside ``shape``.
        """
        self._check_range(region)
        storage = self._storage()
        out = zeros(region.shape, dtype=storage.dtype, device=self.device)
        offsets = [self._offset + ravel_index(index, self._strides) for index in region]
        self.device.gather(storage, out._handle, offsets)
        logger.debug(
            "sliced %s out of shape %s (%d of %d elements)",
            region,
            self._shape,
            len(offsets),
            out.size,
        )
        return out

    def view(self, region: Range) -> "ArrayView":
        """Return a zero-copy view of a contiguous region.

        Parameters
        ----------
        region : Range
            Region to borrow. Every step must be 1 and the region must occupy
            one unbroken run of the buffer.

        Returns
        -------
        ArrayView
            A read-only view sharing storage with this array.

        Raises
        ------
        LayoutError
            If any step is not 1, or ``region`` is not contiguous within ``shape``.
        IndexError
            If ``region`` does not fit inside ``shape``.
        """
        if any(s != 1 for s in region.step):
            raise LayoutError(
                f"Range {region} has a step other than 1 and cannot be viewed"
            )
        self._check_range(region)
        if not is_contiguous(region, self._shape):
            raise LayoutError(
                f"Range {region} is not contiguous within array of shape {self._shape}"
            )
        storage = self._storage()
        # the region is located with our own strides, described with its own
        offset = self._offset + ravel_index(region.start, self._strides)
        view = ArrayView.make(self._root(), region.shape, storage, offset)
        logger.debug("viewed %s of shape %s at offset %d", region, self._shape, offset)
        return view


class Array(NDArrayBase):
    """Dense N-dimensional array that exclusively owns its buffer.

    While any :class:`ArrayView` borrows the buffer the array is frozen:
    writing to it or moving it raises :class:`~ndview.errors.BorrowError`.
    """

    _handle: Any

    def __init__(
        self, other: Any, dtype: Any = None, device: Device | None = None
    ) -> None:
        """Construct an Array by copying an NDArray, NumPy array, or array-like.

        Parameters
        ----------
        other : NDArrayBase | numpy.ndarray | array_like
            Source to copy from, read in row-major order.
        dtype : numpy dtype-like, optional
            Element type. Defaults to the source's type.
        device : Device | None, optional
            Target device. Defaults to the source's device for ndview arrays
            and to the global default device otherwise.
        """
        if isinstance(other, NDArrayBase):
            if device is None:
                device = other.device
            self._init(Array(other.numpy(), dtype=dtype, device=device))
        else:
            source = np.asarray(other, dtype=dtype)
            array = Array.make(source.shape, device=device, dtype=source.dtype)
            array.device.from_numpy(source, array._handle)
            self._init(array)

    def _init(self, other: "Array") -> None:
        """Initialize this instance by taking metadata and handle from ``other``."""
        self._shape = other._shape
        self._strides = other._strides
        self._offset = 0
        self._device = other._device
        self._handle = other._handle
        self._borrows: "weakref.WeakSet[ArrayView]" = weakref.WeakSet()

    @staticmethod
    def make(
        shape: Sequence[int],
        device: Device | None = None,
        handle: Any = None,
        dtype: Any = None,
    ) -> "Array":
        """Create an Array around new or existing storage.

        Parameters
        ----------
        shape : sequence of int
            Logical shape.
        device : Device | None, optional
            Target device. Defaults to the global default device.
        handle : Any, optional
            Existing backend storage of exactly ``prod(shape)`` elements. If
            None, new uninitialised storage is allocated.
        dtype : numpy dtype-like, optional
            Element type of newly allocated storage.
        """
        array = Array.__new__(Array)
        array._shape = tuple(int(s) for s in shape)
        array._strides = compute_strides(array._shape)
        array._offset = 0
        array._device = device if device is not None else default_device()
        if handle is None:
            array._handle = array.device.Array(size_of(array._shape), dtype)
        else:
            assert handle.size == size_of(array._shape), "storage size must match shape"
            array._handle = handle
        array._borrows = weakref.WeakSet()
        return array

    def __repr__(self) -> str:
        if self._handle is None:
            return f"Array(shape={self._shape}, moved)"
        return f"Array(shape={self._shape}, dtype={self.dtype}, device={self.device})"

    def _storage(self) -> Any:
        if self._handle is None:
            raise BorrowError("Array was moved by reshape and can no longer be used")
        return self._handle

    def _root(self) -> "Array":
        return self

    @property
    def borrowed(self) -> bool:
        """bool: Whether any view currently borrows this array's buffer."""
        return len(self._borrows) > 0

    def _check_writable(self) -> Any:
        storage = self._storage()
        if self.borrowed:
            raise BorrowError(
                f"Array of shape {self._shape} is borrowed by {len(self._borrows)} view(s)"
            )
        return storage

    def __setitem__(self, idx: Index, value: Any) -> None:
        """Write ``value`` at coordinate ``idx``.

        Raises
        ------
        IndexError
            If ``idx`` has the wrong arity or lies outside ``shape``.
        BorrowError
            If views of this array are alive.
        """
        storage = self._check_writable()
        self.device.setitem(storage, self._flat_offset(idx), value)

    def fill(self, value: Any) -> None:
        """Fill the entire array with a scalar value."""
        self.device.fill(self._check_writable(), value)

    def reshape(self, new_shape: Sequence[int]) -> "Array":
        """Move the buffer into a new Array of shape ``new_shape``.

        The flat element order is unchanged. After the call this array no
        longer owns anything and every further use raises ``BorrowError``.

        Parameters
        ----------
        new_shape : sequence of int
            Target shape, of any arity. Its product must equal ``size``.

        Returns
        -------
        Array
            The new owner of the buffer.

        Raises
        ------
        DimensionError
            If the element counts differ.
        BorrowError
            If views of this array are alive, or it was already moved.
        """
        new_shape = tuple(int(s) for s in new_shape)
        if size_of(self._shape) != size_of(new_shape):
            raise DimensionError(
                f"Shape products do not match for {self._shape} and {new_shape}"
            )
        handle = self._check_writable()
        out = Array.make(new_shape, device=self.device, handle=handle)
        self._handle = None
        logger.debug("moved buffer from shape %s to %s", self._shape, new_shape)
        return out


class ArrayView(NDArrayBase):
    """Read-only window onto a contiguous run of an owned array's buffer.

    A view keeps its owning :class:`Array` alive and registers itself with
    it, so the owner refuses writes and moves until the view is collected.
    """

    _owner: Array
    _handle: Any

    @staticmethod
    def make(
        owner: Array, shape: Sequence[int], handle: Any, offset: int
    ) -> "ArrayView":
        view = ArrayView.__new__(ArrayView)
        view._owner = owner
        view._shape = tuple(shape)
        view._strides = compute_strides(view._shape)
        view._offset = offset
        view._device = owner.device
        view._handle = handle
        owner._borrows.add(view)
        return view

    def __repr__(self) -> str:
        return (
            f"ArrayView(shape={self._shape}, offset={self._offset}, "
            f"dtype={self.dtype}, device={self.device})"
        )

    @property
    def base(self) -> Array:
        """Array: The owned array whose buffer this view borrows."""
        return self._owner

    @property
    def offset(self) -> int:
        """int: Element offset of the window inside the owner's buffer."""
        return self._offset

    def _storage(self) -> Any:
        return self._handle

    def _root(self) -> Array:
        return self._owner

    def reshape(self, new_shape: Sequence[int]) -> "ArrayView":
        """Reinterpret the same window under ``new_shape``.

        Raises
        ------
        DimensionError
            If the element counts differ.
        """
        new_shape = tuple(int(s) for s in new_shape)
        if size_of(self._shape) != size_of(new_shape):
            raise DimensionError(
                f"Shape products do not match for {self._shape} and {new_shape}"
            )
        return ArrayView.make(self._owner, new_shape, self._handle, self._offset)


def zeros(
    shape: Sequence[int], dtype: Any = None, device: Device | None = None
) -> Array:
    """Allocate an owned array of ``prod(shape)`` zeros."""
    array = Array.make(shape, device=device, dtype=dtype)
    array.device.fill(array._handle, 0)
    logger.debug("allocated %s array of shape %s", array.dtype, array.shape)
    return array


def array(a: Any, dtype: Any = None, device: Device | None = None) -> Array:
    """Convenience methods to match numpy a bit more closely."""
    return Array(a, dtype=dtype, device=device)
