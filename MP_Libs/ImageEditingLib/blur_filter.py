"""
Box Blur Operations and Brush-Scoped Local Blur.

Provides the approximate box blur used by MagicPhotos:
- Four-pass IIR blur: Exponential moving average run across rows and
  columns in both directions with 4-bit fixed point accumulation
- Local blur: The same blur applied to the brush rectangle and painted
  back through an inscribed ellipse

Example:
    >>> from MP_Libs.ImageEditingLib.image_models import Point
    >>>
    >>> # Whole-image blur
    >>> blurred = box_blur(image, radius=4)
    >>>
    >>> # Blur under a brush at (120, 80), repainting the previous spot
    >>> apply_local_blur(image, Point(120, 80), brush_radius=16,
    ...                  gaussian_radius=4, last_center=Point(110, 80))
"""

from typing import Optional, Tuple

import numpy as np

from MP_Libs.ImageEditingLib.brush_mask import ellipse_mask
from MP_Libs.ImageEditingLib.image_models import ImageBuffer, Rect
from MP_Libs.constants import (
    BLUR_ALPHA_IDENTITY,
    BLUR_ALPHA_MAX_SMOOTHING,
    BLUR_ALPHA_TABLE,
)


# ============================================================================
# Four-Pass IIR Blur
# ============================================================================

def blur_alpha(radius: int) -> int:
    """
    Convert a blur radius into the smoothing coefficient of the recurrence.

    Args:
        radius: Blur radius in pixels

    Returns:
        16 for radius < 1 (identity), 1 for radius > 17 (maximum smoothing),
        otherwise BLUR_ALPHA_TABLE[radius - 1]
    """
    if radius < 1:
        return BLUR_ALPHA_IDENTITY
    if radius > len(BLUR_ALPHA_TABLE):
        return BLUR_ALPHA_MAX_SMOOTHING
    return BLUR_ALPHA_TABLE[radius - 1]


def _step(acc: np.ndarray, samples: np.ndarray, alpha: int) -> np.ndarray:
    # acc += ((s << 4) - acc) * alpha / 16, dividing toward zero
    scaled = ((samples << 4) - acc) * alpha
    acc += np.where(scaled >= 0, scaled // 16, -((-scaled) // 16))
    return acc >> 4


def _blur_rows(work: np.ndarray, alpha: int, reverse: bool) -> None:
    width = work.shape[1]
    columns = range(width - 1, -1, -1) if reverse else range(width)
    columns = iter(columns)

    acc = work[:, next(columns), :] << 4
    for x in columns:
        work[:, x, :] = _step(acc, work[:, x, :], alpha)


def _blur_columns(work: np.ndarray, alpha: int, reverse: bool) -> None:
    height = work.shape[0]
    rows = range(height - 1, -1, -1) if reverse else range(height)
    rows = iter(rows)

    acc = work[next(rows), :, :] << 4
    for y in rows:
        work[y, :, :] = _step(acc, work[y, :, :], alpha)


def blur_channels(image: ImageBuffer, radius: int) -> ImageBuffer:
    """
    Run the four blur passes over raw channel values.

    Passes, each consuming the previous one's output:
        1. left to right across every row
        2. top to bottom down every column
        3. right to left across every row
        4. bottom to top up every column

    Each pass is seeded with the first pixel it visits. All four channels,
    alpha included, are smoothed the same way.

    Args:
        image: Source buffer (not modified)
        radius: Blur radius, mapped through blur_alpha()

    Returns:
        New blurred buffer with the same dimensions
    """
    height, width = image.shape[:2]
    if width == 0 or height == 0:
        return image.copy()

    alpha = blur_alpha(radius)
    work = image.astype(np.int32)

    _blur_rows(work, alpha, reverse=False)
    _blur_columns(work, alpha, reverse=False)
    _blur_rows(work, alpha, reverse=True)
    _blur_columns(work, alpha, reverse=True)

    return work.astype(np.uint8)


# ============================================================================
# Premultiplied Alpha
# ============================================================================

def premultiply(image: ImageBuffer) -> ImageBuffer:
    """Scale R, G, B by alpha / 255, rounding to nearest."""
    work = image.astype(np.int32)
    alpha = work[:, :, 3:4]
    work[:, :, :3] = (work[:, :, :3] * alpha + 127) // 255
    return work.astype(np.uint8)


def unpremultiply(image: ImageBuffer) -> ImageBuffer:
    """Inverse of premultiply(); fully transparent pixels become (0, 0, 0, 0)."""
    work = image.astype(np.int32)
    alpha = work[:, :, 3:4]
    safe_alpha = np.maximum(alpha, 1)

    color = (work[:, :, :3] * 255 + safe_alpha // 2) // safe_alpha
    work[:, :, :3] = np.where(alpha > 0, np.minimum(color, 255), 0)
    return work.astype(np.uint8)


def box_blur(image: ImageBuffer, radius: int) -> ImageBuffer:
    """
    Apply the four-pass blur over premultiplied channels.

    Args:
        image: Source buffer (not modified)
        radius: Blur radius; < 1 returns an exact copy

    Returns:
        New blurred buffer with the same dimensions
    """
    if blur_alpha(radius) == BLUR_ALPHA_IDENTITY:
        return image.copy()

    return unpremultiply(blur_channels(premultiply(image), radius))


# ============================================================================
# Brush-Scoped Local Blur
# ============================================================================

def clip_brush_rect(center: Tuple[int, int], radius: int, width: int, height: int) -> Rect:
    """
    Square of edge 2 * radius around center, clamped to the buffer.

    The left/top edges are clamped into [0, dimension - 1] while the far
    edges stay put, then the far edges are cut at the buffer bounds. The
    result may be empty when the brush lies entirely off the buffer.
    """
    size = radius * 2
    left, top = center[0] - radius, center[1] - radius
    right, bottom = left + size, top + size

    left = max(min(left, width - 1), 0)
    top = max(min(top, height - 1), 0)

    return Rect(left, top, min(right, width) - left, min(bottom, height) - top)


def extract_region(image: ImageBuffer, rect: Rect) -> ImageBuffer:
    """Copy the pixels covered by rect."""
    return image[rect.top:rect.bottom, rect.left:rect.right].copy()


def blur_region(image: ImageBuffer, rect: Rect, radius: int) -> ImageBuffer:
    """Blur a copy of the pixels covered by rect."""
    return box_blur(extract_region(image, rect), radius)


def paint_through_ellipse(target: ImageBuffer, rect: Rect, patch: ImageBuffer) -> None:
    """Paint patch onto target at rect, clipped to the inscribed ellipse."""
    if rect.is_empty():
        return

    mask = ellipse_mask(rect.width, rect.height)
    region = target[rect.top:rect.bottom, rect.left:rect.right]
    region[mask] = patch[mask]


def apply_local_blur(
    image: ImageBuffer,
    center: Tuple[int, int],
    brush_radius: int,
    gaussian_radius: int,
    last_center: Optional[Tuple[int, int]] = None,
) -> None:
    """
    Blur the brush area around center in place.

    When last_center is given, the rectangle around it is snapshotted before
    this update's blur and painted back afterwards, so the spot blurred by the
    previous update is redrawn on top of the new one.

    Args:
        image: Buffer to modify
        center: Brush center in image space
        brush_radius: Brush radius in image pixels
        gaussian_radius: Radius passed to box_blur()
        last_center: Brush center of the previous stroke update, if any
    """
    height, width = image.shape[:2]
    if width == 0 or height == 0:
        return

    last_rect = None
    last_patch = None
    if last_center is not None:
        last_rect = clip_brush_rect(last_center, brush_radius, width, height)
        if not last_rect.is_empty():
            last_patch = extract_region(image, last_rect)

    blur_rect = clip_brush_rect(center, brush_radius, width, height)
    if not blur_rect.is_empty():
        paint_through_ellipse(image, blur_rect, blur_region(image, blur_rect, gaussian_radius))

    if last_patch is not None:
        paint_through_ellipse(image, last_rect, last_patch)
