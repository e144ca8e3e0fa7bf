"""
Unit tests for brush_mask module.

Tests the disc predicate and the vectorised masks built on it.
"""

import numpy as np
import pytest

from MP_Libs.ImageEditingLib.brush_mask import disc_mask, ellipse_mask, in_brush


class TestInBrush:
    """Tests for in_brush function."""

    def test_on_boundary_is_inside(self):
        """Distance exactly equal to the radius counts as inside."""
        assert in_brush((0, 0), 5, (3, 4))
        assert in_brush((10, 10), 5, (15, 10))

    def test_outside(self):
        assert not in_brush((0, 0), 5, (4, 4))

    def test_zero_radius(self):
        assert in_brush((2, 2), 0, (2, 2))
        assert not in_brush((2, 2), 0, (2, 3))


class TestDiscMask:
    """Tests for disc_mask function."""

    @pytest.mark.parametrize("center,radius", [((5, 5), 3), ((0, 2), 4), ((7, -1), 2)])
    def test_matches_in_brush(self, center, radius):
        """Every mask entry agrees with the scalar predicate."""
        mask = disc_mask(center, radius, 0, 0, 10, 8)

        for y in range(8):
            for x in range(10):
                assert mask[y, x] == in_brush(center, radius, (x, y))

    def test_window_offset(self):
        mask = disc_mask((20, 30), 1, 19, 29, 3, 3)

        expected = np.array([
            [False, True, False],
            [True, True, True],
            [False, True, False],
        ])
        np.testing.assert_array_equal(mask, expected)


class TestEllipseMask:
    """Tests for ellipse_mask function."""

    def test_square_is_symmetric_circle(self):
        mask = ellipse_mask(8, 8)

        assert mask.shape == (8, 8)
        assert mask[4, 4]
        assert not mask[0, 0]
        assert not mask[7, 7]
        np.testing.assert_array_equal(mask, mask.T)
        np.testing.assert_array_equal(mask, mask[::-1, ::-1])

    def test_rectangle_shape(self):
        mask = ellipse_mask(10, 4)

        assert mask.shape == (4, 10)
        assert mask[2, 0]
        assert not mask[0, 0]

    def test_empty(self):
        assert ellipse_mask(0, 5).size == 0
