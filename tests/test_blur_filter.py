"""
Tests for Box Blur Operations and Local Blur.

Tests cover:
- Radius to coefficient mapping
- Four-pass recurrence (identity, maximum smoothing, fixed points)
- Premultiplied alpha helpers
- Brush rectangle clipping
- Local blur painting
"""

import unittest

import numpy as np

from MP_Libs.ImageEditingLib.blur_filter import (
    apply_local_blur,
    blur_alpha,
    blur_channels,
    box_blur,
    clip_brush_rect,
    paint_through_ellipse,
    premultiply,
    unpremultiply,
)
from MP_Libs.ImageEditingLib.image_models import Rect, new_buffer

from conftest import make_noise


class TestBlurAlpha(unittest.TestCase):
    """Test the radius lookup table."""

    def test_table_values(self):
        expected = [14, 10, 8, 6, 5, 5, 4, 3, 3, 3, 3, 2, 2, 2, 2, 2, 2]
        self.assertEqual([blur_alpha(r) for r in range(1, 18)], expected)

    def test_radius_below_one_is_identity(self):
        self.assertEqual(blur_alpha(0), 16)
        self.assertEqual(blur_alpha(-3), 16)

    def test_radius_above_table_is_max_smoothing(self):
        self.assertEqual(blur_alpha(18), 1)
        self.assertEqual(blur_alpha(1000), 1)


class TestBlurChannels(unittest.TestCase):
    """Test the four-pass recurrence."""

    def setUp(self):
        self.noise = make_noise(23, 17, seed=7)
        self.noise[:, :, 3] = np.random.default_rng(3).integers(0, 256, size=(17, 23))

    def test_radius_zero_is_exact_identity(self):
        """alpha == 16 reproduces every channel exactly."""
        result = blur_channels(self.noise, 0)

        np.testing.assert_array_equal(result, self.noise)

    def test_uniform_field_is_fixed_point(self):
        image = new_buffer(9, 6, (40, 90, 200, 180))

        for radius in (1, 4, 17, 30):
            np.testing.assert_array_equal(blur_channels(image, radius), image)

    def test_large_radius_matches_max_smoothing(self):
        """Every radius above 17 runs the alpha == 1 recurrence."""
        np.testing.assert_array_equal(
            blur_channels(self.noise, 18),
            blur_channels(self.noise, 250),
        )

    def test_single_row_recurrence(self):
        """Hand-computed alpha == 1 result on a 3x1 buffer."""
        image = new_buffer(3, 1)
        image[0, 1] = (160, 160, 160, 160)

        result = blur_channels(image, 18)

        # Pass 1: [0, 10, 9]; pass 3: [8, 9, 9]; column passes are no-ops
        np.testing.assert_array_equal(result[0, :, 0], [8, 9, 9])
        np.testing.assert_array_equal(result[0, :, 3], [8, 9, 9])

    def test_passes_run_in_both_directions(self):
        """A single bright pixel spreads to both sides."""
        image = new_buffer(9, 9)
        image[4, 4] = (255, 255, 255, 255)

        result = blur_channels(image, 1)

        self.assertGreater(result[4, 3, 0], 0)
        self.assertGreater(result[4, 5, 0], 0)
        self.assertGreater(result[3, 4, 0], 0)
        self.assertGreater(result[5, 4, 0], 0)
        self.assertLess(result[4, 4, 0], 255)

    def test_source_not_modified(self):
        before = self.noise.copy()

        blur_channels(self.noise, 5)

        np.testing.assert_array_equal(self.noise, before)

    def test_empty_buffer(self):
        result = blur_channels(new_buffer(0, 5), 3)

        self.assertEqual(result.shape, (5, 0, 4))


class TestPremultiply(unittest.TestCase):
    """Test premultiplied alpha conversion."""

    def test_opaque_round_trip(self):
        image = make_noise(8, 8)

        np.testing.assert_array_equal(premultiply(image), image)
        np.testing.assert_array_equal(unpremultiply(premultiply(image)), image)

    def test_transparent_pixels_become_zero(self):
        image = new_buffer(2, 2, (200, 100, 50, 0))

        np.testing.assert_array_equal(premultiply(image), new_buffer(2, 2))
        np.testing.assert_array_equal(unpremultiply(image), new_buffer(2, 2))

    def test_half_alpha(self):
        image = new_buffer(1, 1, (200, 100, 0, 128))

        np.testing.assert_array_equal(premultiply(image)[0, 0], [100, 50, 0, 128])


class TestBoxBlur(unittest.TestCase):
    """Test the premultiplied box blur."""

    def test_radius_zero_returns_copy(self):
        image = make_noise(10, 10)
        image[:, :, 3] = 77

        result = box_blur(image, 0)

        np.testing.assert_array_equal(result, image)
        self.assertIsNot(result, image)

    def test_uniform_opaque_unchanged(self):
        image = new_buffer(12, 12, (10, 130, 250, 255))

        np.testing.assert_array_equal(box_blur(image, 6), image)

    def test_opaque_matches_raw_channels(self):
        image = make_noise(15, 11)

        np.testing.assert_array_equal(box_blur(image, 3), blur_channels(image, 3))


class TestClipBrushRect(unittest.TestCase):
    """Test brush rectangle clipping."""

    def test_inside(self):
        self.assertEqual(clip_brush_rect((20, 20), 4, 40, 40), Rect(16, 16, 8, 8))

    def test_clipped_at_origin(self):
        self.assertEqual(clip_brush_rect((1, 2), 4, 40, 40), Rect(0, 0, 5, 6))

    def test_clipped_at_far_edge(self):
        self.assertEqual(clip_brush_rect((38, 39), 4, 40, 40), Rect(34, 35, 6, 5))

    def test_far_outside_keeps_one_pixel(self):
        rect = clip_brush_rect((100, 20), 4, 40, 40)

        self.assertEqual(rect.left, 39)
        self.assertEqual(rect.width, 1)

    def test_far_before_origin_is_empty(self):
        self.assertTrue(clip_brush_rect((-50, 20), 4, 40, 40).is_empty())


class TestLocalBlur(unittest.TestCase):
    """Test the brush-scoped blur."""

    def setUp(self):
        self.image = new_buffer(40, 40, (0, 0, 0, 255))
        self.image[:, 20:] = (255, 255, 255, 255)

    def test_only_brush_rect_changes(self):
        before = self.image.copy()

        apply_local_blur(self.image, (20, 20), brush_radius=4, gaussian_radius=4)

        changed = np.any(self.image != before, axis=2)
        ys, xs = np.nonzero(changed)
        self.assertGreater(len(xs), 0)
        self.assertGreaterEqual(xs.min(), 16)
        self.assertLess(xs.max(), 24)
        self.assertGreaterEqual(ys.min(), 16)
        self.assertLess(ys.max(), 24)

    def test_corners_outside_ellipse_unchanged(self):
        before = self.image.copy()

        apply_local_blur(self.image, (20, 20), brush_radius=4, gaussian_radius=4)

        np.testing.assert_array_equal(self.image[16, 16], before[16, 16])
        np.testing.assert_array_equal(self.image[23, 23], before[23, 23])

    def test_uniform_image_unchanged(self):
        image = new_buffer(30, 30, (90, 90, 90, 255))

        apply_local_blur(image, (15, 15), brush_radius=6, gaussian_radius=8, last_center=(12, 15))

        np.testing.assert_array_equal(image, new_buffer(30, 30, (90, 90, 90, 255)))

    def test_last_center_region_repainted(self):
        """The previous spot is restored from its pre-update snapshot."""
        apply_local_blur(self.image, (20, 20), brush_radius=4, gaussian_radius=4)
        previous = self.image[16:24, 16:24].copy()

        apply_local_blur(self.image, (21, 20), brush_radius=4, gaussian_radius=4,
                         last_center=(20, 20))

        # Pixels inside the previous ellipse come back from the snapshot
        np.testing.assert_array_equal(self.image[20, 20], previous[4, 4])
        np.testing.assert_array_equal(self.image[19, 19], previous[3, 3])

    def test_brush_off_image_is_noop(self):
        before = self.image.copy()

        apply_local_blur(self.image, (-40, -40), brush_radius=4, gaussian_radius=4)

        np.testing.assert_array_equal(self.image, before)


class TestPaintThroughEllipse(unittest.TestCase):

    def test_paints_inside_ellipse_only(self):
        target = new_buffer(10, 10)
        patch = new_buffer(6, 6, (255, 255, 255, 255))

        paint_through_ellipse(target, Rect(2, 2, 6, 6), patch)

        self.assertEqual(target[5, 5, 0], 255)
        self.assertEqual(target[2, 2, 0], 0)
        self.assertEqual(target[0, 0, 0], 0)
