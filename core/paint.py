"""Toolkit-neutral drawing contracts.

`PaintContext` is the subset of a 2D path API the panels draw with; the Qt
implementation lives in `gui.painter`. Coordinates passed to the path
methods are in whatever space the last `set_matrix` established, which for
scope panels is sample space.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .color import Color
    from .scales import Affine, Scales

# Line width rendered as one device pixel whatever the transform.
HAIRLINE = 0.0


class PaintContext(Protocol):
    def set_color(self, color: "Color") -> None: ...

    def set_line_width(self, width: float) -> None: ...

    def set_matrix(self, matrix: "Affine") -> None: ...

    def rectangle(self, x: float, y: float, width: float, height: float) -> None: ...

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def fill(self) -> None: ...

    def stroke(self) -> None: ...

    def paint_image(self, image: Any, x: float = 0.0, y: float = 0.0) -> None: ...


class Panel(Protocol):
    """Anything that can paint itself for the current scales.

    Implementations must not keep `scales` or the context after returning and
    must not emit signals while drawing.
    """

    def draw(self, context: PaintContext, scales: "Scales") -> None: ...


__all__ = ["HAIRLINE", "PaintContext", "Panel"]
