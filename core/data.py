from __future__ import annotations

import logging
from typing import Sequence, Tuple

import numpy as np

from .color import IN1, Color
from .paint import HAIRLINE, PaintContext
from .scales import Scales

logger = logging.getLogger(__name__)


def _freeze_samples(samples: Sequence[float] | np.ndarray) -> np.ndarray:
    """Return a read-only, contiguous 1D float64 copy of `samples`."""
    arr = np.array(samples, dtype=np.float64, copy=True, order="C")
    if arr.ndim != 1:
        raise ValueError(f"samples must be 1D, got {arr.ndim}D")
    arr.setflags(write=False)
    return arr


class DataBuffer:
    """
    Latest acquired sample sequence for the displayed input.

    The buffer is replaced wholesale on every acquisition tick and is never
    edited in place, so a renderer always sees one complete read. It is also
    the waveform panel: one sample per horizontal unit step, the raw value on
    the vertical axis.
    """

    # Above this many samples the trace is peak-decimated before stroking.
    MAX_POINTS = 4096

    def __init__(self, color: Color = IN1) -> None:
        self._color = color
        self._samples: np.ndarray = _freeze_samples(())

    @property
    def samples(self) -> np.ndarray:
        return self._samples

    def __len__(self) -> int:
        return int(self._samples.size)

    def replace(self, samples: Sequence[float] | np.ndarray) -> None:
        self._samples = _freeze_samples(samples)

    def clear(self) -> None:
        self._samples = _freeze_samples(())

    def extremum(self) -> float:
        """Signed sample with the largest magnitude, 0.0 when empty."""
        if self._samples.size == 0:
            return 0.0
        return float(self._samples[int(np.argmax(np.abs(self._samples)))])

    def points(self, scales: Scales) -> Tuple[np.ndarray, np.ndarray]:
        """Sample-space (x, y) vertices of the trace."""
        ys = self._samples
        xs = scales.h[0] + np.arange(ys.size, dtype=np.float64)
        if ys.size > self.MAX_POINTS:
            return _resample_peak(xs, ys, target=self.MAX_POINTS // 2)
        return xs, ys

    def draw(self, context: PaintContext, scales: Scales) -> None:
        if self._samples.size == 0:
            return
        xs, ys = self.points(scales)
        context.set_color(self._color)
        context.set_line_width(HAIRLINE)
        context.move_to(float(xs[0]), float(ys[0]))
        for x, y in zip(xs[1:].tolist(), ys[1:].tolist()):
            context.line_to(x, y)
        context.stroke()


def _resample_peak(xs: np.ndarray, ys: np.ndarray, target: int) -> Tuple[np.ndarray, np.ndarray]:
    """Min/max decimation keeping the x position of each chunk's edges."""
    n = ys.size
    k = n // max(target // 2, 1)
    if k <= 1:
        return xs, ys

    n_chunks = n // k
    n_trim = n_chunks * k
    y_view = ys[:n_trim].reshape(n_chunks, k)
    x_view = xs[:n_trim].reshape(n_chunks, k)

    y_out = np.empty(n_chunks * 2, dtype=ys.dtype)
    y_out[0::2] = y_view.min(axis=1)
    y_out[1::2] = y_view.max(axis=1)

    x_out = np.empty(n_chunks * 2, dtype=xs.dtype)
    x_out[0::2] = x_view[:, 0]
    x_out[1::2] = x_view[:, -1]

    if n_trim < n:
        # Keep the tail so the trace still reaches the last sample.
        x_out = np.append(x_out, xs[-1])
        y_out = np.append(y_out, ys[-1])
    return x_out, y_out


__all__ = ["DataBuffer"]
