"""QPainter implementation of `core.paint.PaintContext`.

Paths are accumulated between `move_to`/`line_to`/`rectangle` calls and
consumed by `fill` or `stroke`, like a cairo context. Line widths are in
user space (they scale with the matrix) except `HAIRLINE`, which is always
one device pixel.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

import pyqtgraph as pg
from PySide6 import QtCore, QtGui

from core.color import Color
from core.paint import HAIRLINE
from core.scales import Affine

logger = logging.getLogger(__name__)


def to_qcolor(color: Color) -> QtGui.QColor:
    return pg.mkColor(color.to_rgba8())


def to_qtransform(matrix: Affine) -> QtGui.QTransform:
    return QtGui.QTransform(matrix.xx, matrix.yx, matrix.xy, matrix.yy, matrix.x0, matrix.y0)


class QtPaintContext:
    """Cairo-style path drawing on top of an active QPainter."""

    def __init__(self, painter: QtGui.QPainter) -> None:
        self._painter = painter
        self._painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)
        self._path = QtGui.QPainterPath()
        self._color = QtGui.QColor(0, 0, 0)
        self._line_width = 1.0

    @property
    def painter(self) -> QtGui.QPainter:
        return self._painter

    def set_color(self, color: Color) -> None:
        self._color = to_qcolor(color)

    def set_line_width(self, width: float) -> None:
        self._line_width = max(float(width), HAIRLINE)

    def set_matrix(self, matrix: Affine) -> None:
        self._painter.setTransform(to_qtransform(matrix))

    def rectangle(self, x: float, y: float, width: float, height: float) -> None:
        self._path.addRect(QtCore.QRectF(x, y, width, height))

    def move_to(self, x: float, y: float) -> None:
        self._path.moveTo(x, y)

    def line_to(self, x: float, y: float) -> None:
        self._path.lineTo(x, y)

    def fill(self) -> None:
        self._painter.fillPath(self._path, QtGui.QBrush(self._color))
        self._path = QtGui.QPainterPath()

    def stroke(self) -> None:
        pen = pg.mkPen(self._color, width=self._line_width)
        # mkPen defaults to cosmetic pens; user-space widths must follow the matrix.
        pen.setCosmetic(self._line_width == HAIRLINE)
        self._painter.strokePath(self._path, pen)
        self._path = QtGui.QPainterPath()

    def paint_image(self, image: QtGui.QImage, x: float = 0.0, y: float = 0.0) -> None:
        self._painter.drawImage(QtCore.QPointF(x, y), image)


@contextmanager
def painting(device: QtGui.QPaintDevice) -> Iterator[QtPaintContext]:
    """Open a painter on `device` for the duration of the block.

    The painter is ended on exit whether or not the block raised.
    """
    painter = QtGui.QPainter(device)
    if not painter.isActive():
        raise RuntimeError(f"cannot paint on {type(device).__name__}")
    try:
        yield QtPaintContext(painter)
    finally:
        painter.end()


__all__ = ["QtPaintContext", "painting", "to_qcolor", "to_qtransform"]
