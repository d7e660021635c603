from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Draw:
    """The drawing surface was exposed or resized."""


@dataclass(frozen=True)
class Level:
    name: str
    value: float


Signal = Union[Draw, Level]
