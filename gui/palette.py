"""Palette - collapsible section with a colour-coded header button."""
from __future__ import annotations

from typing import Optional

from PySide6 import QtWidgets

from core.bus import MessageBus
from core.color import Color
from shared.signals import palette

from .painter import to_qcolor


class Palette(QtWidgets.QWidget):
    """Header toggle that shows or hides the content box below it.

    Expand/Fold are handled locally; a parent adopting a palette declares no
    routes for them, so they never leave this component.
    """

    def __init__(self, bus: MessageBus, label: str = "", parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.handle = bus.attach(self, name=f"palette:{label}" if label else "palette")

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(2)

        self.toggle = QtWidgets.QPushButton(label)
        self.toggle.setCheckable(True)
        layout.addWidget(self.toggle)

        self.content = QtWidgets.QWidget()
        self._content_layout = QtWidgets.QVBoxLayout(self.content)
        self._content_layout.setContentsMargins(6, 4, 6, 4)
        self.content.setVisible(False)
        layout.addWidget(self.content)

        self.toggle.toggled.connect(self._on_toggled)

    def on_signal(self, signal: palette.Signal, model: None) -> None:
        if isinstance(signal, palette.Expand):
            self.content.setVisible(True)
        elif isinstance(signal, palette.Fold):
            self.content.setVisible(False)

    def _on_toggled(self, checked: bool) -> None:
        self.handle.emit(palette.Expand() if checked else palette.Fold())

    def add(self, widget: QtWidgets.QWidget) -> None:
        self._content_layout.addWidget(widget)

    def set_color(self, color: Color) -> None:
        qcolor = to_qcolor(color)
        self.toggle.setStyleSheet(f"border-left: 6px solid {qcolor.name()}; padding: 4px; text-align: left;")
