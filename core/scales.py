"""Sample-space to surface-space coordinate mapping.

Instrument data lives in *sample space*: the horizontal axis is the sample
index inside the acquisition buffer and the vertical axis is the measured
value in volts. Drawing surfaces live in *pixel space* with the origin in the
top-left corner and the vertical axis pointing down.

`Scales` describes the visible sample-space rectangle and produces the
`Affine` that maps it onto a surface of a given pixel size. Everything is
pure and immutable so a frame can be computed from a snapshot.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple, Tuple

from .errors import DegenerateSurface, InvalidScale

if TYPE_CHECKING:
    from instrument.base import Instrument


class Affine(NamedTuple):
    """2x3 affine matrix in (xx, yx, xy, yy, x0, y0) order.

    A point maps as ``x' = xx * x + xy * y + x0`` and
    ``y' = yx * x + yy * y + y0``.
    """

    xx: float
    yx: float
    xy: float
    yy: float
    x0: float
    y0: float

    def map(self, x: float, y: float) -> Tuple[float, float]:
        return (
            self.xx * x + self.xy * y + self.x0,
            self.yx * x + self.yy * y + self.y0,
        )

    def invert(self) -> "Affine":
        det = self.xx * self.yy - self.xy * self.yx
        if det == 0:
            raise DegenerateSurface("affine matrix is not invertible")
        xx = self.yy / det
        yx = -self.yx / det
        xy = -self.xy / det
        yy = self.xx / det
        return Affine(
            xx=xx,
            yx=yx,
            xy=xy,
            yy=yy,
            x0=-(xx * self.x0 + xy * self.y0),
            y0=-(yx * self.x0 + yy * self.y0),
        )


def _check_range(name: str, bounds: Tuple[float, float]) -> Tuple[float, float]:
    try:
        low, high = (float(bounds[0]), float(bounds[1]))
    except (TypeError, ValueError, IndexError) as exc:
        raise InvalidScale(f"{name} range must be a (min, max) pair, got {bounds!r}") from exc
    if not (math.isfinite(low) and math.isfinite(high)):
        raise InvalidScale(f"{name} range must be finite, got {bounds!r}")
    if low >= high:
        raise InvalidScale(f"{name} range must satisfy min < max, got {bounds!r}")
    return low, high


@dataclass(frozen=True)
class Scales:
    """Visible sample-space rectangle.

    Attributes:
        h: (min, max) sample-index range on the horizontal axis.
        v: (min, max) value range on the vertical axis.
    """

    h: Tuple[float, float]
    v: Tuple[float, float]

    def __post_init__(self) -> None:
        object.__setattr__(self, "h", _check_range("horizontal", self.h))
        object.__setattr__(self, "v", _check_range("vertical", self.v))

    @classmethod
    def for_instrument(cls, instrument: "Instrument") -> "Scales":
        """Scales covering one full acquisition buffer over the input range."""
        return cls(h=(0.0, float(instrument.buffer_size)), v=tuple(instrument.voltage_range))

    @property
    def width(self) -> float:
        return self.h[1] - self.h[0]

    @property
    def height(self) -> float:
        return self.v[1] - self.v[0]

    def transform(self, width_px: float, height_px: float) -> Affine:
        """Affine mapping this rectangle onto a ``width_px`` x ``height_px`` surface.

        ``(h.min, v.max)`` lands on the surface origin and ``(h.max, v.min)``
        on the opposite corner; the vertical axis is flipped.
        """
        if width_px <= 0 or height_px <= 0:
            raise DegenerateSurface(f"surface has no drawable area ({width_px}x{height_px})")
        scale_x = width_px / self.width
        scale_y = height_px / self.height
        return Affine(
            xx=scale_x,
            yx=0.0,
            xy=0.0,
            yy=-scale_y,
            x0=-self.h[0] * scale_x,
            y0=self.v[1] * scale_y,
        )

    def to_pixel(self, x: float, y: float, width_px: float, height_px: float) -> Tuple[float, float]:
        return self.transform(width_px, height_px).map(x, y)

    def clamp_h(self, x: float) -> float:
        return min(max(float(x), self.h[0]), self.h[1])

    def clamp_v(self, y: float) -> float:
        return min(max(float(y), self.v[0]), self.v[1])


__all__ = ["Affine", "Scales"]
