"""End-to-end behaviour of the root window against the simulated instrument.

The window runs on a bus without a scheduler so each test drains it
explicitly and sees every signal's effect deterministically.
"""
from __future__ import annotations

import numpy as np
import pytest

from core.bus import MessageBus
from instrument.simulated import SimulatedInstrument
from shared.app_settings import AppSettingsStore
from shared.models import Form, GeneratorParameter, InputSource, Source, TriggerParameter
from shared.signals import application, graph


@pytest.fixture
def instrument() -> SimulatedInstrument:
    return SimulatedInstrument(noise_level=0.0)


@pytest.fixture
def quits():
    return []


@pytest.fixture
def window(qapp, instrument, quits):
    from gui.main_window import MainWindow

    bus = MessageBus()
    win = MainWindow(instrument, bus=bus, on_quit=lambda: quits.append(list(instrument.calls)))
    yield win
    if not bus.closed:
        bus.close()
    win.deleteLater()


def _start_acquisition(window):
    window.acquire_widget.toggle.setChecked(True)
    window.bus.drain()


class TestQuit:
    def test_quit_while_acquiring_stops_everything_in_order(self, window, instrument, quits):
        _start_acquisition(window)
        assert instrument.is_started()
        instrument.calls.clear()

        window.handle.emit(application.Quit())
        window.bus.drain()

        expected = [("stop",), ("stop_generator", Source.OUT1), ("stop_generator", Source.OUT2)]
        assert instrument.calls == expected
        assert quits == [expected]
        assert window.bus.closed

        window.handle.emit(application.AcquireTick())
        window.bus.drain()
        assert instrument.calls == expected

    def test_quit_attempts_every_stop_even_if_one_fails(self, window, instrument, quits):
        instrument.failing.add("stop")
        window.handle.emit(application.Quit())
        window.bus.drain()

        assert [call[0] for call in instrument.calls] == ["stop", "stop_generator", "stop_generator"]
        assert len(quits) == 1

    def test_closing_the_window_quits(self, window, instrument, quits):
        window.show()
        window.close()
        assert len(quits) == 1
        assert window.bus.closed


class TestAcquisition:
    def test_tick_replaces_buffer_with_latest_read(self, window, instrument):
        window.generator_widget.channels[Source.OUT1].output_toggle.setChecked(True)
        _start_acquisition(window)

        for _ in range(2):
            window.handle.emit(application.AcquireTick())
            window.bus.drain()
            np.testing.assert_array_equal(window.model.data.samples, instrument.last_read)

        assert len(window.model.data) == instrument.buffer_size
        assert window.graph.level_left.value == pytest.approx(window.model.data.extremum())

    def test_tick_is_ignored_while_stopped(self, window, instrument):
        window.handle.emit(application.AcquireTick())
        window.bus.drain()
        assert not any(call[0] == "read_all" for call in instrument.calls)
        assert len(window.model.data) == 0

    def test_stop_button(self, window, instrument):
        _start_acquisition(window)
        window.acquire_widget.toggle.setChecked(False)
        window.bus.drain()
        assert not instrument.is_started()
        assert window.acquire_widget.toggle.text() == "Run"
        assert window.status_text() == "Stopped"

    def test_read_targets_first_input(self, window, instrument):
        _start_acquisition(window)
        window.handle.emit(application.AcquireTick())
        window.bus.drain()
        assert ("read_all", InputSource.IN1) in instrument.calls


class TestControls:
    def test_amplitude_reaches_instrument_and_model(self, window, instrument):
        window.generator_widget.channels[Source.OUT1].amplitude_spin.setValue(0.5)
        window.bus.drain()

        assert ("set_generator", Source.OUT1, GeneratorParameter.AMPLITUDE, 0.5) in instrument.calls
        assert window.model.generator[Source.OUT1].amplitude == 0.5

    def test_form_change_on_second_output(self, window, instrument):
        channel = window.generator_widget.channels[Source.OUT2]
        channel.form_combo.setCurrentIndex(channel.form_combo.findData(Form.PWM.value))
        window.bus.drain()

        assert ("set_generator", Source.OUT2, GeneratorParameter.FORM, Form.PWM) in instrument.calls
        assert window.model.generator[Source.OUT2].form is Form.PWM
        assert channel.duty_cycle_visible()

    def test_output_toggle(self, window, instrument):
        window.generator_widget.channels[Source.OUT2].output_toggle.setChecked(True)
        window.bus.drain()
        assert instrument.output_enabled(Source.OUT2)
        assert window.model.generator[Source.OUT2].enabled

    def test_trigger_level_spin_updates_meter(self, window, instrument):
        window.trigger_widget.level_spin.setValue(1.5)
        window.bus.drain()

        assert ("set_trigger", TriggerParameter.LEVEL, 1.5) in instrument.calls
        assert window.model.trigger.level == 1.5
        assert window.graph.level_right.value == 1.5

    def test_trigger_delay_spin_updates_meter(self, window, instrument):
        window.trigger_widget.delay_spin.setValue(640)
        window.bus.drain()

        assert window.model.trigger.delay == 640
        assert window.graph.level_top.value == 640.0


class TestLevelMeters:
    def test_trigger_meter_drag_is_clamped(self, window, instrument):
        window.graph.level_right.drag_to(0.0, 9.0)
        window.bus.drain()

        assert ("set_trigger", TriggerParameter.LEVEL, 5.0) in instrument.calls
        assert window.trigger_widget.level == 5.0
        assert window.graph.level_right.value == 5.0

    def test_delay_meter_drag_is_clamped_to_whole_samples(self, window, instrument):
        window.graph.level_top.drag_to(20000.7, 0.0)
        window.bus.drain()

        assert ("set_trigger", TriggerParameter.DELAY, 16384) in instrument.calls
        assert window.trigger_widget.delay == 16384

    def test_delay_meter_drag_rounds(self, window, instrument):
        window.graph.level_top.drag_to(99.6, 0.0)
        window.bus.drain()
        assert window.model.trigger.delay == 100

    def test_input_meter_is_read_only(self, window, instrument):
        window.graph.level_left.drag_to(0.0, 1.0)
        assert window.bus.pending == 0


class TestFailures:
    def test_failed_command_restores_controls_and_shows_status(self, window, instrument):
        window.sync_from_instrument()
        window.bus.drain()
        spin = window.generator_widget.channels[Source.OUT1].amplitude_spin
        assert spin.value() == 1.0

        instrument.failing.add("set_generator")
        spin.setValue(0.7)
        window.bus.drain()

        assert spin.value() == 1.0
        assert window.model.generator[Source.OUT1].amplitude == 1.0
        assert window.status_text().startswith("Error")
        assert "GeneratorAmplitude" in window.status_text()

    def test_next_successful_command_clears_the_error(self, window, instrument):
        instrument.failing.add("set_generator")
        window.generator_widget.channels[Source.OUT1].amplitude_spin.setValue(0.7)
        window.bus.drain()
        assert window.status_text().startswith("Error")

        instrument.failing.clear()
        window.trigger_widget.level_spin.setValue(0.5)
        window.bus.drain()
        assert window.status_text() == "Stopped"

        _start_acquisition(window)
        instrument.failing.add("set_trigger")
        window.graph.level_right.drag_to(0.0, 1.0)
        window.bus.drain()
        assert window.status_text().startswith("Error")

        window.generator_widget.channels[Source.OUT2].output_toggle.setChecked(True)
        window.bus.drain()
        assert window.status_text() == "Acquiring"

    def test_failed_start_unchecks_run_button(self, window, instrument):
        instrument.failing.add("start")
        _start_acquisition(window)

        assert not instrument.is_started()
        assert not window.acquire_widget.is_started()
        assert window.acquire_widget.toggle.text() == "Run"

    def test_failed_trigger_restores_meter(self, window, instrument):
        instrument.failing.add("set_trigger")
        window.graph.level_right.drag_to(0.0, 2.0)
        window.bus.drain()

        assert window.model.trigger.level == 0.0
        assert window.graph.level_right.value == 0.0
        assert window.trigger_widget.level == 0.0


class TestRouting:
    def test_palette_signals_never_reach_generator(self, window, instrument):
        seen = []
        window.generator_widget.handle.component = _Spy(seen)
        palette = window.generator_widget.palettes[Source.OUT1]
        before = list(instrument.calls)

        palette.toggle.setChecked(True)
        window.bus.drain()

        assert not palette.content.isHidden()
        assert seen == []
        assert instrument.calls == before

    def test_graph_draw_paints_a_frame(self, window):
        window.graph.canvas.resize(400, 200)
        window.graph.handle.emit(graph.Draw())
        window.bus.drain()

        image = window.graph.canvas.front_image()
        assert not image.isNull()
        assert (image.width(), image.height()) == (400, 200)

    def test_sync_from_instrument_fills_controls(self, window, instrument):
        instrument.set_generator(Source.OUT2, GeneratorParameter.FREQUENCY, 4400)
        instrument.set_trigger(TriggerParameter.LEVEL, -1.25)

        window.sync_from_instrument()
        window.bus.drain()

        assert window.generator_widget.channels[Source.OUT2].frequency_spin.value() == 4400
        assert window.model.generator[Source.OUT2].frequency == 4400
        assert window.trigger_widget.level == -1.25
        assert window.graph.level_right.value == -1.25


class TestSettings:
    def test_refresh_rate_follows_store(self, window):
        assert window.refresh_interval_ms() == 50
        store = AppSettingsStore()
        window.bind_settings_store(store)
        store.update(refresh_hz=10.0)
        assert window.refresh_interval_ms() == 100


class _Spy:
    def __init__(self, seen):
        self._seen = seen

    def on_signal(self, signal, model):
        self._seen.append(signal)
