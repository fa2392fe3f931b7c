"""Nested-bracket text rendering of arrays and views."""

from typing import Any, Iterator

from .backend.ndarray import NDArrayBase


def _format_axis(
    shape: tuple[int, ...], depth: int, elements: Iterator[Any], lines: list[str]
) -> None:
    prefix = " " * depth
    if depth < len(shape) - 1:
        lines.append(prefix + "[")
        for _ in range(shape[depth]):
            _format_axis(shape, depth + 1, elements, lines)
        lines.append(prefix + "]")
    else:
        row = ", ".join(str(next(elements)) for _ in range(shape[depth]))
        lines.append(f"{prefix}[{row}]")


def format_array(array: NDArrayBase) -> str:
    """Render ``array`` as nested bracketed rows.

    Every axis but the innermost opens a bracket on its own line, indented by
    one space per level, and lists one rendering per element along that axis.
    The innermost axis prints as a single ``[a, b, c]`` line. Elements are
    taken from the buffer strictly in flat order. A (2, 3) array holding
    ``0..5`` renders as::

        [
         [0.0, 1.0, 2.0]
         [3.0, 4.0, 5.0]
        ]
    """
    elements = iter(array.numpy().flat)
    if array.ndim == 0:
        return str(next(elements))
    lines: list[str] = []
    _format_axis(array.shape, 0, elements, lines)
    return "\n".join(lines)
