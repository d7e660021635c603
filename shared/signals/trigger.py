from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Delay:
    """Trigger delay in samples."""

    value: int


@dataclass(frozen=True)
class Level:
    """Trigger level in volts."""

    value: float


Signal = Union[Delay, Level]
