from __future__ import annotations

"""
Base class for the instrument the console drives.

Contract consumed by the GUI:
- Acquisition run control: start() / stop() / is_started().
- Full buffer read: read_all(source) -> 1D float array of volts.
- Generator outputs: start/stop and get/set of amplitude, offset,
  frequency, duty cycle and waveform form per output.
- Trigger: get/set of delay (samples) and level (volts).

Every call is synchronous and small; failures surface as
`core.errors.InstrumentError` subclasses. Subclasses implement the *_impl()
methods and rely on the validation done here.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Tuple

import numpy as np

from core.errors import InstrumentError
from shared.models import (
    Form,
    GeneratorParameter,
    GeneratorSettings,
    InputSource,
    Source,
    TriggerParameter,
    TriggerSettings,
)

logger = logging.getLogger(__name__)


class Instrument(ABC):
    """
    Abstract oscilloscope + two-output signal generator.

    Typical flow:
        instrument = Driver(...)
        instrument.set_generator(Source.OUT1, GeneratorParameter.FREQUENCY, 1000)
        instrument.start_generator(Source.OUT1)
        instrument.start()
        samples = instrument.read_all(InputSource.IN1)
        instrument.stop()
        instrument.close()
    """

    # Samples per acquisition buffer and the input range in volts.
    buffer_size: int = 16_384
    voltage_range: Tuple[float, float] = (-5.0, 5.0)

    def __init__(self) -> None:
        self._started = False

    @classmethod
    @abstractmethod
    def instrument_class_name(cls) -> str:
        """Human-friendly name for status displays."""
        raise NotImplementedError

    # ---- Acquisition -------------------------------------------------------

    def start(self) -> None:
        self._start_impl()
        self._started = True

    def stop(self) -> None:
        self._stop_impl()
        self._started = False

    def is_started(self) -> bool:
        return self._started

    def read_all(self, source: InputSource) -> np.ndarray:
        samples = np.asarray(self._read_all_impl(InputSource(source)), dtype=np.float64)
        if samples.ndim != 1:
            raise InstrumentError(f"{source.name} read returned a {samples.ndim}D array")
        return samples

    @abstractmethod
    def _start_impl(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def _stop_impl(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def _read_all_impl(self, source: InputSource) -> np.ndarray:
        raise NotImplementedError

    # ---- Generator ---------------------------------------------------------

    def start_generator(self, source: Source) -> None:
        self._set_output_impl(Source(source), True)

    def stop_generator(self, source: Source) -> None:
        self._set_output_impl(Source(source), False)

    def get_generator(self, source: Source, parameter: GeneratorParameter) -> Any:
        return self._get_generator_impl(Source(source), GeneratorParameter(parameter))

    def set_generator(self, source: Source, parameter: GeneratorParameter, value: Any) -> None:
        parameter = GeneratorParameter(parameter)
        self._set_generator_impl(Source(source), parameter, _coerce_generator(parameter, value))

    def generator_settings(self, source: Source) -> GeneratorSettings:
        """Snapshot every parameter of one output (output state is not queried)."""
        values = {parameter.value: self.get_generator(source, parameter) for parameter in GeneratorParameter}
        return GeneratorSettings(**values)

    @abstractmethod
    def _set_output_impl(self, source: Source, enabled: bool) -> None:
        raise NotImplementedError

    @abstractmethod
    def _get_generator_impl(self, source: Source, parameter: GeneratorParameter) -> Any:
        raise NotImplementedError

    @abstractmethod
    def _set_generator_impl(self, source: Source, parameter: GeneratorParameter, value: Any) -> None:
        raise NotImplementedError

    # ---- Trigger -----------------------------------------------------------

    def get_trigger(self, parameter: TriggerParameter) -> Any:
        return self._get_trigger_impl(TriggerParameter(parameter))

    def set_trigger(self, parameter: TriggerParameter, value: Any) -> None:
        parameter = TriggerParameter(parameter)
        if parameter is TriggerParameter.DELAY:
            value = int(value)
        else:
            value = float(value)
        self._set_trigger_impl(parameter, value)

    def trigger_settings(self) -> TriggerSettings:
        return TriggerSettings(
            delay=int(self.get_trigger(TriggerParameter.DELAY)),
            level=float(self.get_trigger(TriggerParameter.LEVEL)),
        )

    @abstractmethod
    def _get_trigger_impl(self, parameter: TriggerParameter) -> Any:
        raise NotImplementedError

    @abstractmethod
    def _set_trigger_impl(self, parameter: TriggerParameter, value: Any) -> None:
        raise NotImplementedError

    # ---- Lifecycle ---------------------------------------------------------

    def close(self) -> None:
        """Release the connection. Outputs are left as they are."""
        self._close_impl()

    def _close_impl(self) -> None:
        pass


def _coerce_generator(parameter: GeneratorParameter, value: Any) -> Any:
    if parameter is GeneratorParameter.FORM:
        return Form(value)
    if parameter is GeneratorParameter.FREQUENCY:
        value = int(value)
        if value < 0:
            raise ValueError("frequency must be non-negative")
        return value
    value = float(value)
    if parameter is GeneratorParameter.DUTY_CYCLE and not 0.0 <= value <= 1.0:
        raise ValueError("duty cycle must be within [0, 1]")
    return value


__all__ = ["Instrument"]
