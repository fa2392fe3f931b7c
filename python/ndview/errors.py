__all__ = [
    "BorrowError",
    "DimensionError",
    "InvalidRangeError",
    "LayoutError",
    "NDViewError",
]


class NDViewError(Exception):
    """
    Base error which all ndview errors are sub-classed from.
    """


class DimensionError(NDViewError, ValueError):
    """
    Raised when two shapes address a different number of elements.
    """


class LayoutError(NDViewError, ValueError):
    """
    Raised when a zero-copy view is requested over a region that is not
    contiguous in the underlying buffer.
    """


class InvalidRangeError(NDViewError, ValueError):
    """
    Raised when a Range is constructed from inconsistent bounds.
    """


class BorrowError(NDViewError, RuntimeError):
    """
    Raised when an owned array is written to or moved while views borrow its
    buffer, or used after its buffer was moved.
    """
