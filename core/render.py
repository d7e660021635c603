"""Frame composition for the scope display.

Paint order is fixed: background and grid, overlay panels in the order they
were declared, then the waveform while acquisition is running. Each frame
starts by filling the whole scales rectangle, so nothing from a previous
frame survives.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from .color import BACKGROUND, MAIN_SCALE, SECONDARY_SCALE
from .grid import DEFAULT_DIVISIONS, grid_lines
from .paint import PaintContext, Panel
from .scales import Affine, Scales

logger = logging.getLogger(__name__)


class GridPanel:
    """Background fill plus graticule."""

    def __init__(self, divisions: int = DEFAULT_DIVISIONS) -> None:
        if divisions < 1:
            raise ValueError("divisions must be at least 1")
        self.divisions = int(divisions)

    def draw(self, context: PaintContext, scales: Scales) -> None:
        h_min, h_max = scales.h
        v_min, v_max = scales.v

        context.set_color(BACKGROUND)
        context.rectangle(h_min, v_min, scales.width, scales.height)
        context.fill()

        for line in grid_lines(scales, self.divisions):
            context.set_color(MAIN_SCALE if line.main else SECONDARY_SCALE)
            context.set_line_width(line.width)
            if line.axis == "vertical":
                context.move_to(line.position, v_min)
                context.line_to(line.position, v_max)
            else:
                context.move_to(h_min, line.position)
                context.line_to(h_max, line.position)
            context.stroke()


class Renderer:
    """Paints one complete frame from a fixed, declared list of panels."""

    def __init__(
        self,
        layers: Sequence[Panel],
        waveform: Panel,
        *,
        line_width: float = 0.01,
    ) -> None:
        self._layers = tuple(layers)
        self._waveform = waveform
        self._line_width = float(line_width)

    @property
    def layers(self) -> tuple[Panel, ...]:
        return self._layers

    def render(
        self,
        context: PaintContext,
        width_px: float,
        height_px: float,
        scales: Scales,
        *,
        acquiring: bool,
    ) -> Optional[Affine]:
        """Paint a frame and return the matrix used, or None if skipped.

        A surface without drawable area (typically while the widget is being
        realized or collapsed) skips the frame without touching `context`.
        """
        if width_px <= 0 or height_px <= 0:
            logger.debug("Skipping frame for %sx%s surface", width_px, height_px)
            return None

        matrix = scales.transform(width_px, height_px)
        context.set_matrix(matrix)
        context.set_line_width(self._line_width)

        for layer in self._layers:
            layer.draw(context, scales)

        if acquiring:
            self._waveform.draw(context, scales)
        return matrix


__all__ = ["GridPanel", "Renderer"]
