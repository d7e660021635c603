from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Expand:
    pass


@dataclass(frozen=True)
class Fold:
    pass


Signal = Union[Expand, Fold]
