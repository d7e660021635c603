from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Level:
    """The operator dragged indicator `name` to `value`."""

    name: str
    value: float


@dataclass(frozen=True)
class Show:
    """Display `value` on indicator `name` without reporting it upward."""

    name: str
    value: float


Signal = Union[Level, Show]
