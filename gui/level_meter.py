"""LevelMeter - indicator strip along one edge of the scope display.

A meter draws a bar from the axis origin to its current reading inside a
thin strip of the sample-space rectangle. Editable meters also turn pointer
drags inside their strip into `level.Level` signals.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from core.bus import MessageBus
from core.color import Color
from core.paint import PaintContext
from core.scales import Scales
from shared.signals import level


class Orientation(Enum):
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"

    @property
    def vertical(self) -> bool:
        return self is not Orientation.TOP


@dataclass
class LevelModel:
    value: float = 0.0


class LevelMeter:

    # Strip thickness as a fraction of the axis it is measured along.
    STRIP_FRACTION = {Orientation.LEFT: 0.02, Orientation.RIGHT: 0.02, Orientation.TOP: 0.04}
    # Smallest grab area in pixels, so thin strips stay usable.
    MIN_HIT_PX = 12.0

    def __init__(
        self,
        bus: MessageBus,
        orientation: Orientation,
        name: str,
        color: Color,
        *,
        editable: bool = True,
    ) -> None:
        self.orientation = orientation
        self.name = name
        self.color = color
        self.editable = editable
        self.handle = bus.attach(self, LevelModel(), name=f"level:{name}")

    @property
    def value(self) -> float:
        return self.handle.model.value

    def on_signal(self, signal: level.Signal, model: LevelModel) -> None:
        if isinstance(signal, (level.Level, level.Show)) and signal.name == self.name:
            model.value = float(signal.value)

    def rect(self, scales: Scales) -> Tuple[float, float, float, float]:
        """(x, y, width, height) of the strip in sample space."""
        fraction = self.STRIP_FRACTION[self.orientation]
        if self.orientation is Orientation.LEFT:
            return scales.h[0], scales.v[0], scales.width * fraction, scales.height
        if self.orientation is Orientation.RIGHT:
            strip = scales.width * fraction
            return scales.h[1] - strip, scales.v[0], strip, scales.height
        strip = scales.height * fraction
        return scales.h[0], scales.v[1] - strip, scales.width, strip

    def draw(self, context: PaintContext, scales: Scales) -> None:
        x, y, width, height = self.rect(scales)
        bar_color = self.color._replace(a=0.6)

        if self.orientation.vertical:
            base = scales.clamp_v(0.0)
            reading = scales.clamp_v(self.value)
            context.set_color(bar_color)
            context.rectangle(x, min(base, reading), width, abs(reading - base))
            context.fill()

            context.set_color(self.color)
            context.set_line_width(scales.height / 250.0)
            context.move_to(x, reading)
            context.line_to(x + width, reading)
            context.stroke()
        else:
            reading = scales.clamp_h(self.value)
            context.set_color(bar_color)
            context.rectangle(x, y, reading - x, height)
            context.fill()

            context.set_color(self.color)
            context.set_line_width(scales.width / 250.0)
            context.move_to(reading, y)
            context.line_to(reading, y + height)
            context.stroke()

    def hit(self, px: float, py: float, width_px: float, height_px: float) -> bool:
        """Whether a pointer at pixel (px, py) grabs this meter."""
        if not self.editable or width_px <= 0 or height_px <= 0:
            return False
        fraction = self.STRIP_FRACTION[self.orientation]
        if self.orientation is Orientation.LEFT:
            return 0 <= px <= max(width_px * fraction, self.MIN_HIT_PX)
        if self.orientation is Orientation.RIGHT:
            return width_px - max(width_px * fraction, self.MIN_HIT_PX) <= px <= width_px
        return 0 <= py <= max(height_px * fraction, self.MIN_HIT_PX)

    def drag_to(self, x: float, y: float) -> None:
        """Report the pointer at sample-space (x, y) as this meter's new value."""
        if not self.editable:
            return
        self.handle.emit(level.Level(self.name, y if self.orientation.vertical else x))


__all__ = ["LevelMeter", "LevelModel", "Orientation"]
