"""Signals of a single generator output panel (the output itself is implied)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from shared.models import Form as FormKind


@dataclass(frozen=True)
class Amplitude:
    value: float


@dataclass(frozen=True)
class Offset:
    value: float


@dataclass(frozen=True)
class Frequency:
    value: int


@dataclass(frozen=True)
class DutyCycle:
    value: float


@dataclass(frozen=True)
class Form:
    form: FormKind


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class Stop:
    pass


Signal = Union[Amplitude, Offset, Frequency, DutyCycle, Form, Start, Stop]
