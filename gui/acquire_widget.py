"""AcquireWidget - run/stop control for the acquisition."""
from __future__ import annotations

from typing import Optional

from PySide6 import QtWidgets

from core.bus import MessageBus
from shared.signals import acquire


class AcquireWidget(QtWidgets.QWidget):

    def __init__(self, bus: MessageBus, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.handle = bus.attach(self, name="acquire")

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.toggle = QtWidgets.QPushButton("Run")
        self.toggle.setCheckable(True)
        self.toggle.setFixedHeight(32)
        layout.addWidget(self.toggle)
        layout.addStretch(1)

        self.toggle.toggled.connect(self._on_toggled)

    def on_signal(self, signal: acquire.Signal, model: None) -> None:
        self._sync_label()

    def _on_toggled(self, checked: bool) -> None:
        self.handle.emit(acquire.Start() if checked else acquire.Stop())

    def _sync_label(self) -> None:
        self.toggle.setText("Stop" if self.toggle.isChecked() else "Run")

    def set_started(self, started: bool) -> None:
        """Reflect the instrument state without emitting."""
        self.toggle.blockSignals(True)
        self.toggle.setChecked(started)
        self.toggle.blockSignals(False)
        self._sync_label()

    def is_started(self) -> bool:
        return self.toggle.isChecked()
