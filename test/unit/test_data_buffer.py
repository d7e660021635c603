from __future__ import annotations

import numpy as np
import pytest

from core.color import IN1
from core.data import DataBuffer
from core.paint import HAIRLINE
from core.scales import Scales
from fixtures.recording_context import RecordingContext


@pytest.fixture
def scales() -> Scales:
    return Scales(h=(0, 16384), v=(-5, 5))


class TestReplace:
    def test_starts_empty(self):
        buffer = DataBuffer()
        assert len(buffer) == 0
        assert buffer.extremum() == 0.0

    def test_replace_is_wholesale(self):
        buffer = DataBuffer()
        buffer.replace([1.0, 2.0, 3.0])
        buffer.replace([4.0, 5.0])
        np.testing.assert_array_equal(buffer.samples, [4.0, 5.0])

    def test_samples_are_a_read_only_copy(self):
        source = np.array([0.5, -0.5])
        buffer = DataBuffer()
        buffer.replace(source)
        source[0] = 99.0
        assert buffer.samples[0] == 0.5
        with pytest.raises(ValueError):
            buffer.samples[0] = 1.0

    def test_rejects_multidimensional_input(self):
        with pytest.raises(ValueError):
            DataBuffer().replace(np.zeros((2, 3)))

    def test_clear(self):
        buffer = DataBuffer()
        buffer.replace([1.0])
        buffer.clear()
        assert len(buffer) == 0

    def test_extremum_keeps_sign(self):
        buffer = DataBuffer()
        buffer.replace([0.2, -3.5, 1.0])
        assert buffer.extremum() == -3.5
        buffer.replace([0.2, 3.0, -1.0])
        assert buffer.extremum() == 3.0


class TestPoints:
    def test_one_sample_per_horizontal_unit(self, scales):
        buffer = DataBuffer()
        buffer.replace([0.0, 1.0, -1.0])
        xs, ys = buffer.points(scales)
        np.testing.assert_array_equal(xs, [0.0, 1.0, 2.0])
        np.testing.assert_array_equal(ys, [0.0, 1.0, -1.0])

    def test_x_starts_at_horizontal_minimum(self):
        buffer = DataBuffer()
        buffer.replace([0.0, 1.0])
        xs, _ = buffer.points(Scales(h=(100, 200), v=(-1, 1)))
        np.testing.assert_array_equal(xs, [100.0, 101.0])

    def test_long_buffers_are_peak_decimated(self, scales):
        samples = np.zeros(16384)
        samples[5000] = 4.0
        samples[9000] = -4.0
        buffer = DataBuffer()
        buffer.replace(samples)

        xs, ys = buffer.points(scales)

        assert len(ys) <= DataBuffer.MAX_POINTS
        assert ys.max() == 4.0
        assert ys.min() == -4.0
        assert xs[0] == 0.0
        assert xs[-1] == 16383.0
        assert np.all(np.diff(xs) >= 0)


class TestDraw:
    def test_empty_buffer_draws_nothing(self, scales):
        context = RecordingContext()
        DataBuffer().draw(context, scales)
        assert context.calls == []

    def test_draws_a_hairline_polyline(self, scales):
        context = RecordingContext()
        buffer = DataBuffer()
        buffer.replace([0.0, 1.0, 2.0])
        buffer.draw(context, scales)

        assert context.calls == [
            ("set_color", IN1),
            ("set_line_width", HAIRLINE),
            ("move_to", 0.0, 0.0),
            ("line_to", 1.0, 1.0),
            ("line_to", 2.0, 2.0),
            ("stroke",),
        ]
