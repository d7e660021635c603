from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


# ----------------------------
# Instrument channels
# ----------------------------

class Source(Enum):
    """Generator output."""

    OUT1 = 1
    OUT2 = 2

    @property
    def label(self) -> str:
        return self.name


class InputSource(Enum):
    """Acquisition input."""

    IN1 = 1
    IN2 = 2

    @property
    def label(self) -> str:
        return self.name


class Form(Enum):
    """Generator waveform shape, valued by its SCPI keyword."""

    SINE = "SINE"
    SQUARE = "SQUARE"
    TRIANGLE = "TRIANGLE"
    SAWU = "SAWU"
    SAWD = "SAWD"
    PWM = "PWM"
    DC = "DC"

    @property
    def label(self) -> str:
        return {
            Form.SINE: "Sine",
            Form.SQUARE: "Square",
            Form.TRIANGLE: "Triangle",
            Form.SAWU: "Sawtooth up",
            Form.SAWD: "Sawtooth down",
            Form.PWM: "PWM",
            Form.DC: "DC",
        }[self]


class GeneratorParameter(Enum):
    AMPLITUDE = "amplitude"
    OFFSET = "offset"
    FREQUENCY = "frequency"
    DUTY_CYCLE = "duty_cycle"
    FORM = "form"


class TriggerParameter(Enum):
    DELAY = "delay"
    LEVEL = "level"


# ----------------------------
# Acknowledged settings
# ----------------------------

@dataclass(frozen=True)
class GeneratorSettings:
    """Parameters of one generator output as last confirmed by the instrument."""

    amplitude: float = 1.0
    offset: float = 0.0
    frequency: int = 1_000
    duty_cycle: float = 0.5
    form: Form = Form.SINE
    enabled: bool = False

    def __post_init__(self) -> None:
        if self.frequency < 0:
            raise ValueError("frequency must be non-negative")
        if not 0.0 <= self.duty_cycle <= 1.0:
            raise ValueError("duty_cycle must be within [0, 1]")
        if not isinstance(self.form, Form):
            object.__setattr__(self, "form", Form(self.form))

    def get(self, parameter: GeneratorParameter) -> Any:
        return getattr(self, parameter.value)

    def with_value(self, parameter: GeneratorParameter, value: Any) -> "GeneratorSettings":
        return replace(self, **{parameter.value: value})


@dataclass(frozen=True)
class TriggerSettings:
    """Trigger delay (samples) and level (volts) as last confirmed by the instrument."""

    delay: int = 0
    level: float = 0.0

    def get(self, parameter: TriggerParameter) -> Any:
        return getattr(self, parameter.value)

    def with_value(self, parameter: TriggerParameter, value: Any) -> "TriggerSettings":
        return replace(self, **{parameter.value: value})


__all__ = [
    "Form",
    "GeneratorParameter",
    "GeneratorSettings",
    "InputSource",
    "Source",
    "TriggerParameter",
    "TriggerSettings",
]
