"""GraphWidget - the scope display: drawing canvas plus edge level meters.

Frames are painted into a back image and swapped in only once complete, so
`paintEvent` always blits a whole frame and never a partially drawn one.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from PySide6 import QtCore, QtGui, QtWidgets

from core.bus import MessageBus
from core.color import IN1, TRIGGER
from core.grid import DEFAULT_DIVISIONS
from core.paint import PaintContext
from core.render import GridPanel
from core.scales import Affine, Scales
from shared.signals import graph, level

from .level_meter import LevelMeter, Orientation
from .painter import QtPaintContext, painting

logger = logging.getLogger(__name__)


class Canvas(QtWidgets.QWidget):
    """Double-buffered drawing surface."""

    resized = QtCore.Signal()
    pointerPressed = QtCore.Signal(float, float)
    pointerMoved = QtCore.Signal(float, float)
    pointerReleased = QtCore.Signal()

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self._front = QtGui.QImage()
        self.setMinimumSize(240, 160)
        self.setSizePolicy(QtWidgets.QSizePolicy.Expanding, QtWidgets.QSizePolicy.Expanding)
        self.setAttribute(QtCore.Qt.WA_OpaquePaintEvent, True)

    def surface_size(self) -> Tuple[int, int]:
        return self.width(), self.height()

    def front_image(self) -> QtGui.QImage:
        return self._front

    @contextmanager
    def frame(self) -> Iterator[QtPaintContext]:
        """Paint context over a fresh back image, presented when the block completes."""
        width, height = self.surface_size()
        back = QtGui.QImage(width, height, QtGui.QImage.Format.Format_ARGB32_Premultiplied)
        back.fill(QtGui.QColor(0, 0, 0))
        with painting(back) as context:
            yield context
        self._front = back
        self.update()

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:  # type: ignore[override]
        if self._front.isNull():
            return
        with painting(self) as context:
            context.paint_image(self._front)

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self.resized.emit()

    def showEvent(self, event: QtGui.QShowEvent) -> None:  # type: ignore[override]
        super().showEvent(event)
        self.resized.emit()

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        if event.button() == QtCore.Qt.LeftButton:
            pos = event.position()
            self.pointerPressed.emit(pos.x(), pos.y())

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        if event.buttons() & QtCore.Qt.LeftButton:
            pos = event.position()
            self.pointerMoved.emit(pos.x(), pos.y())

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        if event.button() == QtCore.Qt.LeftButton:
            self.pointerReleased.emit()


class GraphWidget(QtWidgets.QWidget):
    """Scope display panel: background, grid and the level meters."""

    def __init__(
        self,
        bus: MessageBus,
        *,
        divisions: int = DEFAULT_DIVISIONS,
        parent: Optional[QtWidgets.QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.handle = bus.attach(self, name="graph")
        self.grid = GridPanel(divisions)

        self.level_left = LevelMeter(bus, Orientation.LEFT, "IN1", IN1, editable=False)
        self.level_right = LevelMeter(bus, Orientation.RIGHT, "TRIG", TRIGGER)
        self.level_top = LevelMeter(bus, Orientation.TOP, "DELAY", TRIGGER)
        for meter in self.meters:
            self.handle.adopt(meter.handle, {level.Level: lambda s: graph.Level(s.name, s.value)})

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.canvas = Canvas()
        layout.addWidget(self.canvas)

        self._view: Optional[Affine] = None
        self._dragging: Optional[LevelMeter] = None

        self.canvas.resized.connect(lambda: self.handle.emit(graph.Draw()))
        self.canvas.pointerPressed.connect(self._on_pointer_pressed)
        self.canvas.pointerMoved.connect(self._on_pointer_moved)
        self.canvas.pointerReleased.connect(self._on_pointer_released)

    @property
    def meters(self) -> List[LevelMeter]:
        return [self.level_left, self.level_right, self.level_top]

    def meter(self, name: str) -> LevelMeter:
        for meter in self.meters:
            if meter.name == name:
                return meter
        raise KeyError(name)

    def on_signal(self, signal: graph.Signal, model: None) -> None:
        pass

    # ---- Drawing -----------------------------------------------------------

    def surface_size(self) -> Tuple[int, int]:
        return self.canvas.surface_size()

    def frame(self):
        return self.canvas.frame()

    def set_view(self, matrix: Optional[Affine]) -> None:
        """Record the matrix of the frame on screen, for pointer hit-testing."""
        self._view = matrix

    def draw(self, context: PaintContext, scales: Scales) -> None:
        self.grid.draw(context, scales)
        for meter in self.meters:
            meter.draw(context, scales)

    # ---- Pointer -----------------------------------------------------------

    def _on_pointer_pressed(self, px: float, py: float) -> None:
        width, height = self.surface_size()
        self._dragging = next((m for m in self.meters if m.hit(px, py, width, height)), None)
        self._on_pointer_moved(px, py)

    def _on_pointer_moved(self, px: float, py: float) -> None:
        if self._dragging is None or self._view is None:
            return
        x, y = self._view.invert().map(px, py)
        self._dragging.drag_to(x, y)

    def _on_pointer_released(self) -> None:
        self._dragging = None


__all__ = ["Canvas", "GraphWidget"]
