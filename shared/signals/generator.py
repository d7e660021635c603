from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from shared.models import Form as FormKind
from shared.models import Source


@dataclass(frozen=True)
class Amplitude:
    source: Source
    value: float


@dataclass(frozen=True)
class Offset:
    source: Source
    value: float


@dataclass(frozen=True)
class Frequency:
    source: Source
    value: int


@dataclass(frozen=True)
class DutyCycle:
    source: Source
    value: float


@dataclass(frozen=True)
class Form:
    source: Source
    form: FormKind


@dataclass(frozen=True)
class Start:
    source: Source


@dataclass(frozen=True)
class Stop:
    source: Source


Signal = Union[Amplitude, Offset, Frequency, DutyCycle, Form, Start, Stop]
