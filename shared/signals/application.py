"""Application-level signals consumed by the root coordinator."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from shared.models import Form, Source


@dataclass(frozen=True)
class AcquireStart:
    pass


@dataclass(frozen=True)
class AcquireStop:
    pass


@dataclass(frozen=True)
class AcquireTick:
    """A new full read is due from the instrument."""


@dataclass(frozen=True)
class GeneratorAmplitude:
    source: Source
    value: float


@dataclass(frozen=True)
class GeneratorOffset:
    source: Source
    value: float


@dataclass(frozen=True)
class GeneratorFrequency:
    source: Source
    value: int


@dataclass(frozen=True)
class GeneratorDutyCycle:
    source: Source
    value: float


@dataclass(frozen=True)
class GeneratorForm:
    source: Source
    form: Form


@dataclass(frozen=True)
class GeneratorStart:
    source: Source


@dataclass(frozen=True)
class GeneratorStop:
    source: Source


@dataclass(frozen=True)
class GraphDraw:
    pass


@dataclass(frozen=True)
class Level:
    name: str
    value: float


@dataclass(frozen=True)
class TriggerDelay:
    value: int


@dataclass(frozen=True)
class TriggerLevel:
    value: float


@dataclass(frozen=True)
class Quit:
    pass


Signal = Union[
    AcquireStart,
    AcquireStop,
    AcquireTick,
    GeneratorAmplitude,
    GeneratorOffset,
    GeneratorFrequency,
    GeneratorDutyCycle,
    GeneratorForm,
    GeneratorStart,
    GeneratorStop,
    GraphDraw,
    Level,
    TriggerDelay,
    TriggerLevel,
    Quit,
]
