"""Graticule geometry for the scope display."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal

from .scales import Scales

DEFAULT_DIVISIONS = 10

Axis = Literal["vertical", "horizontal"]


@dataclass(frozen=True)
class GridLine:
    """One graticule line in sample space.

    Vertical lines sit at ``position`` on the horizontal axis and span the
    full value range; horizontal lines sit at ``position`` on the value axis.
    """

    axis: Axis
    index: int
    position: float
    main: bool
    width: float


def is_main_line(index: int, divisions: int) -> bool:
    """Borders and every multiple of half the division count are main lines."""
    return (2 * index) % divisions == 0


def grid_lines(scales: Scales, divisions: int = DEFAULT_DIVISIONS) -> List[GridLine]:
    """Return ``divisions + 1`` vertical then ``divisions + 1`` horizontal lines.

    Line widths are proportional to the extent of the axis the line crosses,
    so they keep the same apparent thickness when the surface is resized.
    """
    if divisions < 1:
        raise ValueError("divisions must be at least 1")

    h_min, _ = scales.h
    v_min, _ = scales.v
    vertical_width = scales.width / 1000.0
    horizontal_width = scales.height / 1000.0

    lines: List[GridLine] = []
    for i in range(divisions + 1):
        lines.append(
            GridLine(
                axis="vertical",
                index=i,
                position=h_min + scales.width * i / divisions,
                main=is_main_line(i, divisions),
                width=vertical_width,
            )
        )
    for i in range(divisions + 1):
        lines.append(
            GridLine(
                axis="horizontal",
                index=i,
                position=v_min + scales.height * i / divisions,
                main=is_main_line(i, divisions),
                width=horizontal_width,
            )
        )
    return lines


__all__ = ["DEFAULT_DIVISIONS", "GridLine", "grid_lines", "is_main_line"]
