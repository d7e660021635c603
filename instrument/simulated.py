# instrument/simulated.py
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Set, Tuple

import numpy as np

from core.errors import InstrumentUnreachable
from shared.models import (
    Form,
    GeneratorParameter,
    GeneratorSettings,
    InputSource,
    Source,
    TriggerParameter,
    TriggerSettings,
)

from .base import Instrument

logger = logging.getLogger(__name__)

# Input IN<n> is wired to output OUT<n>.
_LOOPBACK = {InputSource.IN1: Source.OUT1, InputSource.IN2: Source.OUT2}


class SimulatedInstrument(Instrument):
    """
    Instrument that loops each generator output back into the matching input.

    Reads synthesize one buffer from the current output settings, shifted by
    the trigger delay, plus seeded noise, so repeated runs are reproducible.

    Every public call is appended to `calls` as ``(operation, *args)`` before
    it takes effect, which lets tests assert exact call order. Operations
    listed in `failing` raise `InstrumentUnreachable` without changing any
    state; `reachable = False` makes every operation fail.
    """

    # 125 MS/s with decimation 1024.
    sample_rate: float = 125e6 / 1024

    @classmethod
    def instrument_class_name(cls) -> str:
        return "Simulated"

    def __init__(self, *, noise_level: float = 0.01, seed: Optional[int] = 0) -> None:
        super().__init__()
        self._noise_level = float(noise_level)
        self._rng = np.random.default_rng(seed)
        self._generators: Dict[Source, GeneratorSettings] = {
            source: GeneratorSettings(frequency=100) for source in Source
        }
        self._trigger = TriggerSettings()
        self.calls: List[Tuple[Any, ...]] = []
        self.failing: Set[str] = set()
        self.reachable = True
        self.closed = False
        self.last_read: Optional[np.ndarray] = None

    # ---- Failure injection -------------------------------------------------

    def _call(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, *args))
        if not self.reachable or operation in self.failing:
            raise InstrumentUnreachable(f"simulated instrument refused {operation}")

    # ---- Acquisition -------------------------------------------------------

    def _start_impl(self) -> None:
        self._call("start")

    def _stop_impl(self) -> None:
        self._call("stop")

    def _read_all_impl(self, source: InputSource) -> np.ndarray:
        self._call("read_all", source)
        samples = self._synthesize(self._generators[_LOOPBACK[source]])
        self.last_read = samples.copy()
        return samples

    def _synthesize(self, settings: GeneratorSettings) -> np.ndarray:
        n = self.buffer_size
        if not settings.enabled:
            signal = np.zeros(n, dtype=np.float64)
        else:
            t = (np.arange(n, dtype=np.float64) + self._trigger.delay) / self.sample_rate
            phase = np.mod(settings.frequency * t, 1.0)
            signal = settings.amplitude * _shape(settings.form, phase, settings.duty_cycle) + settings.offset
        if self._noise_level > 0:
            signal = signal + self._rng.normal(0.0, self._noise_level, size=n)
        low, high = self.voltage_range
        return np.clip(signal, low, high)

    # ---- Generator ---------------------------------------------------------

    def _set_output_impl(self, source: Source, enabled: bool) -> None:
        self._call("start_generator" if enabled else "stop_generator", source)
        self._generators[source] = replace(self._generators[source], enabled=enabled)

    def _get_generator_impl(self, source: Source, parameter: GeneratorParameter) -> Any:
        self._call("get_generator", source, parameter)
        return self._generators[source].get(parameter)

    def _set_generator_impl(self, source: Source, parameter: GeneratorParameter, value: Any) -> None:
        self._call("set_generator", source, parameter, value)
        self._generators[source] = self._generators[source].with_value(parameter, value)

    def output_enabled(self, source: Source) -> bool:
        return self._generators[Source(source)].enabled

    # ---- Trigger -----------------------------------------------------------

    def _get_trigger_impl(self, parameter: TriggerParameter) -> Any:
        self._call("get_trigger", parameter)
        return self._trigger.get(parameter)

    def _set_trigger_impl(self, parameter: TriggerParameter, value: Any) -> None:
        self._call("set_trigger", parameter, value)
        self._trigger = self._trigger.with_value(parameter, value)

    def _close_impl(self) -> None:
        self.calls.append(("close",))
        self.closed = True


def _shape(form: Form, phase: np.ndarray, duty_cycle: float) -> np.ndarray:
    """Unit-amplitude waveform for `phase` in [0, 1)."""
    if form is Form.SINE:
        return np.sin(2.0 * np.pi * phase)
    if form is Form.SQUARE:
        return np.where(phase < 0.5, 1.0, -1.0)
    if form is Form.TRIANGLE:
        return 1.0 - 4.0 * np.abs(phase - 0.5)
    if form is Form.SAWU:
        return 2.0 * phase - 1.0
    if form is Form.SAWD:
        return 1.0 - 2.0 * phase
    if form is Form.PWM:
        return np.where(phase < duty_cycle, 1.0, -1.0)
    return np.ones_like(phase)


__all__ = ["SimulatedInstrument"]
