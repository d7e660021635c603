"""MainWindow - root of the component tree and sole owner of the instrument.

Child widgets only emit signals; every instrument command is issued from
`MainWindow.on_signal`, and the application model is changed only once the
instrument has accepted the command. When a command fails the bus reports
it, the status indicator shows the error and the controls are put back to
the last acknowledged values.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional

from PySide6 import QtCore, QtGui, QtWidgets

from core.bus import Failure, MessageBus
from core.color import IN1
from core.data import DataBuffer
from core.errors import InstrumentError
from core.render import Renderer
from core.scales import Scales
from instrument.base import Instrument
from shared.app_settings import AppSettings, AppSettingsStore
from shared.models import (
    GeneratorParameter,
    GeneratorSettings,
    InputSource,
    Source,
    TriggerParameter,
    TriggerSettings,
)
from shared.signals import acquire, application, generator, graph, level, trigger

from .acquire_widget import AcquireWidget
from .bus_adapter import connect_bus_signals, create_qt_bus
from .generator_widget import GeneratorWidget
from .graph_widget import GraphWidget
from .trigger_widget import TriggerWidget

logger = logging.getLogger(__name__)


@dataclass
class ApplicationModel:
    instrument: Instrument
    scales: Scales
    data: DataBuffer
    generator: Dict[Source, GeneratorSettings]
    trigger: TriggerSettings


_GENERATOR_PARAMETERS = {
    application.GeneratorAmplitude: GeneratorParameter.AMPLITUDE,
    application.GeneratorOffset: GeneratorParameter.OFFSET,
    application.GeneratorFrequency: GeneratorParameter.FREQUENCY,
    application.GeneratorDutyCycle: GeneratorParameter.DUTY_CYCLE,
}


class MainWindow(QtWidgets.QMainWindow):
    """Scope window: display on the left, control tabs on the right."""

    def __init__(
        self,
        instrument: Instrument,
        *,
        settings: Optional[AppSettings] = None,
        bus: Optional[MessageBus] = None,
        on_quit: Optional[Callable[[], None]] = None,
    ) -> None:
        super().__init__()
        self._settings = settings or AppSettings()
        self.bus = bus if bus is not None else create_qt_bus()
        self._on_quit = on_quit or QtWidgets.QApplication.quit

        model = ApplicationModel(
            instrument=instrument,
            scales=Scales.for_instrument(instrument),
            data=DataBuffer(IN1),
            generator={source: GeneratorSettings() for source in Source},
            trigger=TriggerSettings(),
        )
        self.handle = self.bus.attach(self, model, name="application")

        self.setWindowTitle(f"PitayaScope - {instrument.instrument_class_name()}")
        self.resize(1100, 640)
        self._init_ui(model)
        self._adopt_children()

        self.renderer = Renderer([self.graph, self.trigger_widget], model.data)

        self._bus_signals, self._unsubscribe_failures = connect_bus_signals(self.bus)
        self._bus_signals.failed.connect(self._on_failure)

        self._settings_unsub: Optional[Callable[[], None]] = None
        self._refresh_timer = QtCore.QTimer(self)
        self._apply_refresh_rate(self._settings.refresh_hz)
        self._refresh_timer.timeout.connect(lambda: self.handle.emit(application.AcquireTick()))
        self._refresh_timer.start()

        self._quit_shortcut = QtGui.QShortcut(QtGui.QKeySequence(QtGui.QKeySequence.StandardKey.Quit), self)
        self._quit_shortcut.activated.connect(self.close)

    def _init_ui(self, model: ApplicationModel) -> None:
        central = QtWidgets.QWidget(self)
        layout = QtWidgets.QHBoxLayout(central)
        layout.setContentsMargins(6, 6, 6, 6)
        layout.setSpacing(8)

        self.graph = GraphWidget(self.bus, divisions=self._settings.grid_divisions)
        layout.addWidget(self.graph, 1)

        h_min, h_max = model.scales.h
        self.acquire_widget = AcquireWidget(self.bus)
        self.generator_widget = GeneratorWidget(self.bus)
        self.trigger_widget = TriggerWidget(
            self.bus,
            delay_range=(0, int(h_max - h_min)),
            level_range=model.scales.v,
        )

        self.tabs = QtWidgets.QTabWidget()
        self.tabs.setMinimumWidth(280)
        self.tabs.addTab(self.acquire_widget, "Acquire")
        self.tabs.addTab(self.generator_widget, "Generator")
        self.tabs.addTab(self.trigger_widget, "Trigger")
        layout.addWidget(self.tabs, 0)
        self.setCentralWidget(central)

        self.status_label = QtWidgets.QLabel()
        self.statusBar().addPermanentWidget(self.status_label)
        self._set_status("Stopped")

    def _adopt_children(self) -> None:
        self.handle.adopt(
            self.acquire_widget.handle,
            {
                acquire.Start: lambda s: application.AcquireStart(),
                acquire.Stop: lambda s: application.AcquireStop(),
            },
        )
        self.handle.adopt(
            self.generator_widget.handle,
            {
                generator.Amplitude: lambda s: application.GeneratorAmplitude(s.source, s.value),
                generator.Offset: lambda s: application.GeneratorOffset(s.source, s.value),
                generator.Frequency: lambda s: application.GeneratorFrequency(s.source, s.value),
                generator.DutyCycle: lambda s: application.GeneratorDutyCycle(s.source, s.value),
                generator.Form: lambda s: application.GeneratorForm(s.source, s.form),
                generator.Start: lambda s: application.GeneratorStart(s.source),
                generator.Stop: lambda s: application.GeneratorStop(s.source),
            },
        )
        self.handle.adopt(
            self.trigger_widget.handle,
            {
                trigger.Delay: lambda s: application.TriggerDelay(s.value),
                trigger.Level: lambda s: application.TriggerLevel(s.value),
            },
        )
        self.handle.adopt(
            self.graph.handle,
            {
                graph.Draw: lambda s: application.GraphDraw(),
                graph.Level: lambda s: application.Level(s.name, s.value),
            },
        )

    @property
    def model(self) -> ApplicationModel:
        return self.handle.model

    # ---- Updates -----------------------------------------------------------

    def on_signal(self, signal: application.Signal, model: ApplicationModel) -> None:
        instrument = model.instrument

        if isinstance(signal, application.AcquireTick):
            if not instrument.is_started():
                return
            model.data.replace(instrument.read_all(InputSource.IN1))
            self._show_level("IN1", model.data.extremum())
            self.handle.emit(application.GraphDraw())

        elif isinstance(signal, application.GraphDraw):
            self._paint(model)

        elif isinstance(signal, application.AcquireStart):
            instrument.start()
            self.acquire_widget.set_started(True)
            self._set_status("Acquiring")

        elif isinstance(signal, application.AcquireStop):
            instrument.stop()
            self.acquire_widget.set_started(False)
            self._set_status("Stopped")
            self.handle.emit(application.GraphDraw())

        elif type(signal) in _GENERATOR_PARAMETERS:
            self._set_generator(model, signal.source, _GENERATOR_PARAMETERS[type(signal)], signal.value)

        elif isinstance(signal, application.GeneratorForm):
            self._set_generator(model, signal.source, GeneratorParameter.FORM, signal.form)

        elif isinstance(signal, application.GeneratorStart):
            instrument.start_generator(signal.source)
            model.generator[signal.source] = replace(model.generator[signal.source], enabled=True)
            self._clear_error(model)

        elif isinstance(signal, application.GeneratorStop):
            instrument.stop_generator(signal.source)
            model.generator[signal.source] = replace(model.generator[signal.source], enabled=False)
            self._clear_error(model)

        elif isinstance(signal, application.TriggerDelay):
            self._set_trigger(model, TriggerParameter.DELAY, int(signal.value))

        elif isinstance(signal, application.TriggerLevel):
            self._set_trigger(model, TriggerParameter.LEVEL, float(signal.value))

        elif isinstance(signal, application.Level):
            if signal.name == "TRIG":
                self._set_trigger(model, TriggerParameter.LEVEL, model.scales.clamp_v(signal.value))
            elif signal.name == "DELAY":
                delay = model.scales.clamp_h(signal.value) - model.scales.h[0]
                self._set_trigger(model, TriggerParameter.DELAY, int(round(delay)))
            else:
                logger.debug("Ignoring level change for %s", signal.name)

        elif isinstance(signal, application.Quit):
            self._quit(model)

    def _set_generator(self, model: ApplicationModel, source: Source, parameter: GeneratorParameter, value) -> None:
        model.instrument.set_generator(source, parameter, value)
        model.generator[source] = model.generator[source].with_value(parameter, value)
        self._clear_error(model)

    def _set_trigger(self, model: ApplicationModel, parameter: TriggerParameter, value) -> None:
        model.instrument.set_trigger(parameter, value)
        model.trigger = model.trigger.with_value(parameter, value)
        self._clear_error(model)
        self._show_trigger(model.trigger)

    def _show_trigger(self, settings: TriggerSettings) -> None:
        """Bring the trigger controls and meters in line with `settings`, then repaint."""
        self.trigger_widget.set_settings(settings)
        self._show_level("TRIG", settings.level)
        self._show_level("DELAY", self.model.scales.h[0] + settings.delay)
        self.handle.emit(application.GraphDraw())

    def _show_level(self, name: str, value: float) -> None:
        meter = self.graph.meter(name)
        meter.handle.emit(level.Show(name, value))

    def _quit(self, model: ApplicationModel) -> None:
        instrument = model.instrument
        steps = (
            ("acquisition", instrument.stop),
            (Source.OUT1.label, lambda: instrument.stop_generator(Source.OUT1)),
            (Source.OUT2.label, lambda: instrument.stop_generator(Source.OUT2)),
        )
        for label, stop in steps:
            try:
                stop()
            except InstrumentError as exc:
                logger.warning("Failed to stop %s on quit: %s", label, exc)
        self._refresh_timer.stop()
        self._unsubscribe_failures()
        if self._settings_unsub is not None:
            self._settings_unsub()
            self._settings_unsub = None
        self.bus.close()
        self._on_quit()

    # ---- Drawing -----------------------------------------------------------

    def _paint(self, model: ApplicationModel) -> None:
        width, height = self.graph.surface_size()
        if width <= 0 or height <= 0:
            logger.debug("Graph surface not realized yet (%sx%s)", width, height)
            return
        with self.graph.frame() as context:
            matrix = self.renderer.render(
                context,
                width,
                height,
                model.scales,
                acquiring=model.instrument.is_started(),
            )
        self.graph.set_view(matrix)

    # ---- Settings ----------------------------------------------------------

    def bind_settings_store(self, store: AppSettingsStore) -> None:
        """Follow refresh-rate changes made through `store`."""
        if self._settings_unsub is not None:
            self._settings_unsub()
        self._settings_unsub = store.subscribe(self._on_app_settings_changed)

    def _on_app_settings_changed(self, settings: AppSettings) -> None:
        self._settings = settings
        self._apply_refresh_rate(settings.refresh_hz)

    def _apply_refresh_rate(self, hz: float) -> None:
        self._refresh_timer.setInterval(max(1, int(round(1000.0 / float(hz)))))

    def refresh_interval_ms(self) -> int:
        return self._refresh_timer.interval()

    # ---- State sync --------------------------------------------------------

    def sync_from_instrument(self) -> None:
        """Load generator and trigger settings from the instrument into the model and controls."""
        model = self.model
        instrument = model.instrument
        generators = {source: instrument.generator_settings(source) for source in Source}
        trigger_settings = instrument.trigger_settings()
        model.generator.update(generators)
        model.trigger = trigger_settings
        self._restore_controls(model)

    def _restore_controls(self, model: ApplicationModel) -> None:
        self.acquire_widget.set_started(model.instrument.is_started())
        for source, settings in model.generator.items():
            self.generator_widget.set_settings(source, settings)
        self._show_trigger(model.trigger)

    def _on_failure(self, failure: Failure) -> None:
        self._set_status(f"Error: {failure.describe()}", error=True)
        if not self.bus.closed:
            self._restore_controls(self.model)

    def _clear_error(self, model: ApplicationModel) -> None:
        if self._error_shown:
            self._set_status("Acquiring" if model.instrument.is_started() else "Stopped")

    def _set_status(self, text: str, *, error: bool = False) -> None:
        self._error_shown = error
        self.status_label.setText(text)
        self.status_label.setStyleSheet("color: #d9534f;" if error else "")

    def status_text(self) -> str:
        return self.status_label.text()

    # ---- Qt events ---------------------------------------------------------

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # type: ignore[override]
        if not self.bus.closed:
            self.handle.emit(application.Quit())
            self.bus.drain()
        super().closeEvent(event)


__all__ = ["ApplicationModel", "MainWindow"]
