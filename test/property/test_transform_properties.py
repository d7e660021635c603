"""
Property-based tests for the sample-space to pixel-space transform.

Properties verified:
1. Corner mapping: (h.min, v.max) lands on the origin and (h.max, v.min) on
   the far corner, for any valid scales and surface size
2. Linearity: interpolated sample points map to interpolated pixels
3. Inversion: the inverse matrix brings pixels back to sample space
4. Grid shape: N + 1 lines per axis, main lines at multiples of N / 2
"""
from __future__ import annotations

import pytest
from hypothesis import assume, given, settings, strategies as st

from core.grid import grid_lines
from core.scales import Scales

coordinate = st.floats(min_value=-1e4, max_value=1e4, allow_nan=False, allow_infinity=False)
extent = st.floats(min_value=0.1, max_value=1e5, allow_nan=False, allow_infinity=False)
surface = st.floats(min_value=1.0, max_value=8192.0, allow_nan=False, allow_infinity=False)
fraction = st.floats(min_value=0.0, max_value=1.0)


@st.composite
def scales_strategy(draw):
    h_min = draw(coordinate)
    v_min = draw(coordinate)
    h_max = h_min + draw(extent)
    v_max = v_min + draw(extent)
    assume(h_min < h_max and v_min < v_max)
    return Scales(h=(h_min, h_max), v=(v_min, v_max))


class TestTransformProperties:
    @given(scales=scales_strategy(), width=surface, height=surface)
    @settings(max_examples=200, deadline=None)
    def test_corners_map_to_surface_corners(self, scales, width, height):
        matrix = scales.transform(width, height)
        origin = matrix.map(scales.h[0], scales.v[1])
        corner = matrix.map(scales.h[1], scales.v[0])
        tol = 1e-6 * max(width, height)
        assert origin == pytest.approx((0.0, 0.0), abs=tol)
        assert corner == pytest.approx((width, height), rel=1e-6, abs=tol)

    @given(scales=scales_strategy(), width=surface, height=surface, tx=fraction, ty=fraction)
    @settings(max_examples=200, deadline=None)
    def test_intermediate_points_vary_linearly(self, scales, width, height, tx, ty):
        x = scales.h[0] + tx * scales.width
        y = scales.v[1] - ty * scales.height
        px, py = scales.to_pixel(x, y, width, height)
        assert px == pytest.approx(tx * width, rel=1e-6, abs=1e-6 * width)
        assert py == pytest.approx(ty * height, rel=1e-6, abs=1e-6 * height)

    @given(scales=scales_strategy(), width=surface, height=surface, tx=fraction, ty=fraction)
    @settings(max_examples=100, deadline=None)
    def test_inverse_returns_to_sample_space(self, scales, width, height, tx, ty):
        matrix = scales.transform(width, height)
        x, y = matrix.invert().map(tx * width, ty * height)
        assert x == pytest.approx(scales.h[0] + tx * scales.width, rel=1e-6, abs=1e-6 * scales.width)
        assert y == pytest.approx(scales.v[1] - ty * scales.height, rel=1e-6, abs=1e-6 * scales.height)


class TestGridProperties:
    @given(scales=scales_strategy(), divisions=st.integers(min_value=1, max_value=64))
    @settings(max_examples=100, deadline=None)
    def test_line_count_and_main_lines(self, scales, divisions):
        lines = grid_lines(scales, divisions)
        for axis in ("vertical", "horizontal"):
            on_axis = [line for line in lines if line.axis == axis]
            assert len(on_axis) == divisions + 1
            assert on_axis[0].main and on_axis[-1].main
            for line in on_axis:
                assert line.main == ((2 * line.index) % divisions == 0)
            interior_main = [line.index for line in on_axis[1:-1] if line.main]
            if divisions % 2 == 0 and divisions > 2:
                assert interior_main == [divisions // 2]
            elif divisions % 2 == 1:
                assert interior_main == []
