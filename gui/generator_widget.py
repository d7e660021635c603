"""Generator panels: one control block per output, grouped in collapsible palettes."""
from __future__ import annotations

import logging
from typing import Dict, Optional

from PySide6 import QtWidgets

from core.bus import MessageBus
from core.color import OUT1, OUT2
from shared.models import Form, GeneratorSettings, Source
from shared.signals import channel, generator

from .palette import Palette

logger = logging.getLogger(__name__)

_SOURCE_COLORS = {Source.OUT1: OUT1, Source.OUT2: OUT2}


class GeneratorChannelWidget(QtWidgets.QWidget):
    """Controls for a single generator output.

    Emits `shared.signals.channel` variants; the output is implied by which
    child emitted, and the parent adds it when translating.
    """

    def __init__(self, bus: MessageBus, source: Source, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.source = source
        self.handle = bus.attach(self, name=f"channel:{source.label}")
        self._build_ui()
        self._connect_signals()

    def _build_ui(self) -> None:
        layout = QtWidgets.QGridLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setVerticalSpacing(4)
        layout.setHorizontalSpacing(6)

        row = 0
        self.output_toggle = QtWidgets.QPushButton("Output off")
        self.output_toggle.setCheckable(True)
        layout.addWidget(self.output_toggle, row, 0, 1, 2)
        row += 1

        layout.addWidget(QtWidgets.QLabel("Waveform"), row, 0)
        self.form_combo = QtWidgets.QComboBox()
        for form in Form:
            self.form_combo.addItem(form.label, form.value)
        layout.addWidget(self.form_combo, row, 1)
        row += 1

        layout.addWidget(QtWidgets.QLabel("Amplitude (V)"), row, 0)
        self.amplitude_spin = QtWidgets.QDoubleSpinBox()
        self.amplitude_spin.setRange(0.0, 1.0)
        self.amplitude_spin.setSingleStep(0.01)
        self.amplitude_spin.setDecimals(3)
        layout.addWidget(self.amplitude_spin, row, 1)
        row += 1

        layout.addWidget(QtWidgets.QLabel("Offset (V)"), row, 0)
        self.offset_spin = QtWidgets.QDoubleSpinBox()
        self.offset_spin.setRange(-1.0, 1.0)
        self.offset_spin.setSingleStep(0.01)
        self.offset_spin.setDecimals(3)
        layout.addWidget(self.offset_spin, row, 1)
        row += 1

        layout.addWidget(QtWidgets.QLabel("Frequency (Hz)"), row, 0)
        self.frequency_spin = QtWidgets.QSpinBox()
        self.frequency_spin.setRange(0, 62_500_000)
        self.frequency_spin.setSingleStep(10)
        layout.addWidget(self.frequency_spin, row, 1)
        row += 1

        self.duty_cycle_label = QtWidgets.QLabel("Duty cycle")
        layout.addWidget(self.duty_cycle_label, row, 0)
        self.duty_cycle_spin = QtWidgets.QDoubleSpinBox()
        self.duty_cycle_spin.setRange(0.0, 1.0)
        self.duty_cycle_spin.setSingleStep(0.01)
        self.duty_cycle_spin.setDecimals(2)
        layout.addWidget(self.duty_cycle_spin, row, 1)
        self._set_duty_cycle_visible(False)

    def _connect_signals(self) -> None:
        self.output_toggle.toggled.connect(self._on_output_toggled)
        self.form_combo.currentIndexChanged.connect(self._on_form_changed)
        self.amplitude_spin.valueChanged.connect(lambda value: self.handle.emit(channel.Amplitude(float(value))))
        self.offset_spin.valueChanged.connect(lambda value: self.handle.emit(channel.Offset(float(value))))
        self.frequency_spin.valueChanged.connect(lambda value: self.handle.emit(channel.Frequency(int(value))))
        self.duty_cycle_spin.valueChanged.connect(lambda value: self.handle.emit(channel.DutyCycle(float(value))))

    def on_signal(self, signal: channel.Signal, model: None) -> None:
        if isinstance(signal, channel.Form):
            self._set_duty_cycle_visible(signal.form is Form.PWM)
        elif isinstance(signal, (channel.Start, channel.Stop)):
            self._sync_output_label()

    def _on_output_toggled(self, checked: bool) -> None:
        self.handle.emit(channel.Start() if checked else channel.Stop())

    def _on_form_changed(self, index: int) -> None:
        form = self.form_combo.itemData(index)
        if form is not None:
            self.handle.emit(channel.Form(Form(form)))

    def _set_duty_cycle_visible(self, visible: bool) -> None:
        self.duty_cycle_label.setVisible(visible)
        self.duty_cycle_spin.setVisible(visible)

    def _sync_output_label(self) -> None:
        self.output_toggle.setText("Output on" if self.output_toggle.isChecked() else "Output off")

    def duty_cycle_visible(self) -> bool:
        return not self.duty_cycle_spin.isHidden()

    def set_settings(self, settings: GeneratorSettings) -> None:
        """Show `settings` without emitting anything."""
        controls = (
            self.output_toggle,
            self.form_combo,
            self.amplitude_spin,
            self.offset_spin,
            self.frequency_spin,
            self.duty_cycle_spin,
        )
        for control in controls:
            control.blockSignals(True)
        try:
            self.output_toggle.setChecked(settings.enabled)
            idx = self.form_combo.findData(settings.form.value)
            if idx >= 0:
                self.form_combo.setCurrentIndex(idx)
            self.amplitude_spin.setValue(settings.amplitude)
            self.offset_spin.setValue(settings.offset)
            self.frequency_spin.setValue(int(settings.frequency))
            self.duty_cycle_spin.setValue(settings.duty_cycle)
        finally:
            for control in controls:
                control.blockSignals(False)
        self._set_duty_cycle_visible(settings.form is Form.PWM)
        self._sync_output_label()


class GeneratorWidget(QtWidgets.QWidget):
    """Both generator outputs; adds the output to each channel signal."""

    def __init__(self, bus: MessageBus, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.handle = bus.attach(self, name="generator")
        self.channels: Dict[Source, GeneratorChannelWidget] = {}
        self.palettes: Dict[Source, Palette] = {}

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

        for source in Source:
            section = Palette(bus, source.label)
            section.set_color(_SOURCE_COLORS[source])
            self.handle.adopt(section.handle, {})

            widget = GeneratorChannelWidget(bus, source)
            self.handle.adopt(widget.handle, _channel_routes(source))
            section.add(widget)

            layout.addWidget(section)
            self.channels[source] = widget
            self.palettes[source] = section
        layout.addStretch(1)

    def on_signal(self, signal: generator.Signal, model: None) -> None:
        logger.debug("generator: %s", signal)

    def set_settings(self, source: Source, settings: GeneratorSettings) -> None:
        self.channels[source].set_settings(settings)


def _channel_routes(source: Source) -> dict:
    return {
        channel.Amplitude: lambda s: generator.Amplitude(source, s.value),
        channel.Offset: lambda s: generator.Offset(source, s.value),
        channel.Frequency: lambda s: generator.Frequency(source, s.value),
        channel.DutyCycle: lambda s: generator.DutyCycle(source, s.value),
        channel.Form: lambda s: generator.Form(source, s.form),
        channel.Start: lambda s: generator.Start(source),
        channel.Stop: lambda s: generator.Stop(source),
    }


__all__ = ["GeneratorChannelWidget", "GeneratorWidget"]
