"""
Clone-stamp pixel copy and sampling point tracking.

Functions:
    clamp_point: Clamp a point into buffer bounds
    sampling_point_for_drag: Move the sampling anchor along with the stroke
    clone_stamp: Copy a source disc onto a destination disc in place
"""

from typing import Tuple

from MP_Libs.ImageEditingLib.brush_mask import in_brush
from MP_Libs.ImageEditingLib.image_models import ImageBuffer, Point


def clamp_point(x: int, y: int, width: int, height: int) -> Point:
    """Clamp (x, y) independently per axis to [0, dimension - 1]."""
    x = min(x, width - 1)
    y = min(y, height - 1)
    return Point(max(x, 0), max(y, 0))


def sampling_point_for_drag(
    initial_sampling_point: Tuple[int, int],
    initial_touch_point: Tuple[float, float],
    touch_point: Tuple[float, float],
    scale: float,
    width: int,
    height: int,
) -> Point:
    """
    Sampling point that follows the stroke.

    The anchor captured at stroke start is shifted by the distance the touch
    point has travelled since then (converted from view to image space by
    scale) and clamped to the buffer.

    Args:
        initial_sampling_point: Sampling anchor at stroke start (image space)
        initial_touch_point: Touch point at stroke start (view space)
        touch_point: Current touch point (view space)
        scale: View/image scale factor
        width, height: Buffer dimensions

    Returns:
        The clamped sampling point
    """
    x = int(initial_sampling_point[0] + (touch_point[0] - initial_touch_point[0]) / scale)
    y = int(initial_sampling_point[1] + (touch_point[1] - initial_touch_point[1]) / scale)
    return clamp_point(x, y, width, height)


def clone_stamp(
    image: ImageBuffer,
    source_center: Tuple[int, int],
    dest_center: Tuple[int, int],
    radius: int,
) -> int:
    """
    Copy the disc around source_center onto the disc around dest_center.

    Source and destination windows are walked in lock-step, columns outer
    and rows inner. A pixel is copied only when the source offset and the
    destination offset each pass the brush disc test and both points lie
    inside the buffer.

    The copy reads and writes the same buffer as it goes, so when the two
    windows overlap later reads can see pixels written earlier in the same
    call.

    Args:
        image: Buffer to modify in place
        source_center: Sampling point (image space)
        dest_center: Brush center (image space)
        radius: Brush radius in image pixels

    Returns:
        Number of pixels copied
    """
    height, width = image.shape[:2]
    sx, sy = source_center
    dx, dy = dest_center
    copied = 0

    for offset_x in range(-radius, radius + 1):
        from_x, to_x = sx + offset_x, dx + offset_x
        if not (0 <= from_x < width and 0 <= to_x < width):
            continue

        for offset_y in range(-radius, radius + 1):
            from_y, to_y = sy + offset_y, dy + offset_y
            if not (0 <= from_y < height and 0 <= to_y < height):
                continue

            if (in_brush(source_center, radius, (from_x, from_y))
                    and in_brush(dest_center, radius, (to_x, to_y))):
                image[to_y, to_x] = image[from_y, from_x]
                copied += 1

    return copied
