"""Named colours used by the scope panels (RGBA, 0..1 floats)."""
from __future__ import annotations

from typing import NamedTuple


class Color(NamedTuple):
    r: float
    g: float
    b: float
    a: float = 1.0

    def to_rgba8(self) -> tuple[int, int, int, int]:
        return tuple(int(round(min(max(c, 0.0), 1.0) * 255)) for c in self)  # type: ignore[return-value]


BACKGROUND = Color(0.11, 0.12, 0.13)
MAIN_SCALE = Color(0.55, 0.58, 0.60)
SECONDARY_SCALE = Color(0.28, 0.30, 0.32)

IN1 = Color(1.0, 0.93, 0.23)
IN2 = Color(0.40, 0.85, 1.0)
OUT1 = Color(0.98, 0.45, 0.55)
OUT2 = Color(0.55, 0.90, 0.45)
TRIGGER = Color(1.0, 0.60, 0.10)
