"""TriggerWidget - trigger delay/level controls and the trigger marker overlay.

The widget holds the current delay and level in its spin boxes; `draw`
reads them to place the marker on the scope display.
"""
from __future__ import annotations

from typing import Optional, Tuple

from PySide6 import QtWidgets

from core.bus import MessageBus
from core.color import TRIGGER
from core.paint import HAIRLINE, PaintContext
from core.scales import Scales
from shared.models import TriggerSettings
from shared.signals import trigger


class TriggerWidget(QtWidgets.QWidget):

    # Length of the level tick, as a fraction of the visible width.
    MARKER_FRACTION = 0.03

    def __init__(
        self,
        bus: MessageBus,
        *,
        delay_range: Tuple[int, int] = (0, 16_384),
        level_range: Tuple[float, float] = (-5.0, 5.0),
        parent: Optional[QtWidgets.QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.handle = bus.attach(self, name="trigger")

        self.trigger_group = QtWidgets.QGroupBox("Trigger")
        trigger_layout = QtWidgets.QGridLayout(self.trigger_group)
        trigger_layout.setContentsMargins(8, 8, 8, 8)
        trigger_layout.setVerticalSpacing(4)
        trigger_layout.setHorizontalSpacing(6)

        main_layout = QtWidgets.QVBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.addWidget(self.trigger_group)
        main_layout.addStretch(1)

        trigger_layout.addWidget(QtWidgets.QLabel("Delay (samples)"), 0, 0)
        self.delay_spin = QtWidgets.QSpinBox()
        self.delay_spin.setRange(int(delay_range[0]), int(delay_range[1]))
        self.delay_spin.setSingleStep(64)
        trigger_layout.addWidget(self.delay_spin, 0, 1)

        trigger_layout.addWidget(QtWidgets.QLabel("Level (V)"), 1, 0)
        self.level_spin = QtWidgets.QDoubleSpinBox()
        self.level_spin.setRange(float(level_range[0]), float(level_range[1]))
        self.level_spin.setSingleStep(0.05)
        self.level_spin.setDecimals(3)
        trigger_layout.addWidget(self.level_spin, 1, 1)

        self.delay_spin.valueChanged.connect(lambda value: self.handle.emit(trigger.Delay(int(value))))
        self.level_spin.valueChanged.connect(lambda value: self.handle.emit(trigger.Level(float(value))))

    def on_signal(self, signal: trigger.Signal, model: None) -> None:
        pass

    @property
    def delay(self) -> int:
        return int(self.delay_spin.value())

    @property
    def level(self) -> float:
        return float(self.level_spin.value())

    def set_settings(self, settings: TriggerSettings) -> None:
        """Show `settings` without emitting anything."""
        for spin in (self.delay_spin, self.level_spin):
            spin.blockSignals(True)
        try:
            self.delay_spin.setValue(int(settings.delay))
            self.level_spin.setValue(float(settings.level))
        finally:
            for spin in (self.delay_spin, self.level_spin):
                spin.blockSignals(False)

    def draw(self, context: PaintContext, scales: Scales) -> None:
        x = scales.clamp_h(scales.h[0] + self.delay)
        y = scales.clamp_v(self.level)
        half = scales.width * self.MARKER_FRACTION / 2.0

        context.set_color(TRIGGER)
        context.set_line_width(HAIRLINE)
        context.move_to(x, scales.v[0])
        context.line_to(x, scales.v[1])
        context.stroke()

        context.set_line_width(scales.height / 250.0)
        context.move_to(scales.clamp_h(x - half), y)
        context.line_to(scales.clamp_h(x + half), y)
        context.stroke()


__all__ = ["TriggerWidget"]
