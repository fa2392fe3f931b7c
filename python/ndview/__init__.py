"""
ndview (N-dimensional views)

Dense row-major N-dimensional arrays with copying slices, zero-copy views over
contiguous regions, reshaping, and N-dimensional coordinate ranges.
"""

from importlib.metadata import PackageNotFoundError as _PkgNotFoundError
from importlib.metadata import version as _pkg_version

from .backend.device import Device, cpu_numpy, default_device
from .backend.ndarray import Array, ArrayView, NDArrayBase, array, zeros
from .errors import (
    BorrowError,
    DimensionError,
    InvalidRangeError,
    LayoutError,
    NDViewError,
)
from .formatting import format_array
from .index_tricks import (
    check_bounds,
    compute_strides,
    is_contiguous,
    ravel_index,
    shape_from_bounds,
    size_of,
    unravel_index,
)
from .ranges import Range, RangeIterator

__all__ = [
    "__version__",
    "Array",
    "ArrayView",
    "BorrowError",
    "Device",
    "DimensionError",
    "InvalidRangeError",
    "LayoutError",
    "NDArrayBase",
    "NDViewError",
    "Range",
    "RangeIterator",
    "array",
    "check_bounds",
    "compute_strides",
    "cpu_numpy",
    "default_device",
    "format_array",
    "is_contiguous",
    "ravel_index",
    "shape_from_bounds",
    "size_of",
    "unravel_index",
    "zeros",
]

try:
    __version__ = _pkg_version("ndview")
except _PkgNotFoundError:
    # Fallback for editable installs before metadata is written
    __version__ = "0.0.1"
