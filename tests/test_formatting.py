import numpy as np
from ndview.backend import ndarray as nd
from ndview.formatting import format_array
from ndview.ranges import Range


def test_format_2d() -> None:
    A = nd.array(np.arange(6, dtype=np.float64).reshape(2, 3))
    assert format_array(A.view(Range.full(A.shape))) == (
        "[\n [0.0, 1.0, 2.0]\n [3.0, 4.0, 5.0]\n]"
    )


def test_format_1d() -> None:
    A = nd.array(np.array([1, 2, 3], dtype=np.int64))
    assert format_array(A) == "[1, 2, 3]"


def test_format_3d() -> None:
    A = nd.array(np.arange(8, dtype=np.int64).reshape(2, 2, 2))
    expected = "\n".join(
        [
            "[",
            " [",
            "  [0, 1]",
            "  [2, 3]",
            " ]",
            " [",
            "  [4, 5]",
            "  [6, 7]",
            " ]",
            "]",
        ]
    )
    assert format_array(A) == expected
    assert str(A) == expected


def test_format_view_of_region() -> None:
    A = nd.array(np.arange(24, dtype=np.int64).reshape(2, 3, 4))
    v = A.view(Range.from_slices(A.shape, (1, slice(1, 3), slice(None))))
    assert str(v) == "[\n [\n  [16, 17, 18, 19]\n  [20, 21, 22, 23]\n ]\n]"


def test_format_reshaped_view_keeps_flat_order() -> None:
    A = nd.array(np.arange(6, dtype=np.int64))
    v = A.view(Range.full(A.shape)).reshape((3, 2))
    assert str(v) == "[\n [0, 1]\n [2, 3]\n [4, 5]\n]"


def test_format_empty_innermost_axis() -> None:
    A = nd.zeros((2, 0))
    assert format_array(A) == "[\n []\n []\n]"


def test_format_scalar() -> None:
    A = nd.array(np.float64(2.5))
    assert A.shape == ()
    assert format_array(A) == "2.5"
