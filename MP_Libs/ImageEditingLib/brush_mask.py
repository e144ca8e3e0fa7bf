"""
Circular brush geometry shared by every brush operation.

Functions:
    in_brush: Disc membership test for a single point
    disc_mask: The same test evaluated over a rectangular window
    ellipse_mask: Clip mask of the ellipse inscribed in a rectangle
"""

from typing import Tuple

import numpy as np


def in_brush(center: Tuple[int, int], radius: int, point: Tuple[int, int]) -> bool:
    """
    Check whether a point lies within the brush disc.

    Args:
        center: Brush center (x, y)
        radius: Brush radius in pixels
        point: Candidate point (x, y)

    Returns:
        True if the Euclidean distance from center to point is <= radius
    """
    dx = point[0] - center[0]
    dy = point[1] - center[1]
    return dx * dx + dy * dy <= radius * radius


def disc_mask(
    center: Tuple[int, int],
    radius: int,
    left: int,
    top: int,
    width: int,
    height: int,
) -> np.ndarray:
    """
    Evaluate in_brush for every pixel of a window.

    Args:
        center: Brush center (x, y)
        radius: Brush radius in pixels
        left, top: Window origin
        width, height: Window size

    Returns:
        Boolean array of shape (height, width)
    """
    xs = np.arange(left, left + width) - center[0]
    ys = np.arange(top, top + height) - center[1]
    return (ys[:, None] ** 2 + xs[None, :] ** 2) <= radius * radius


def ellipse_mask(width: int, height: int) -> np.ndarray:
    """
    Build the clip mask of the ellipse inscribed in a width x height rectangle.

    A pixel is inside when its center falls inside the ellipse.

    Returns:
        Boolean array of shape (height, width)
    """
    if width <= 0 or height <= 0:
        return np.zeros((max(height, 0), max(width, 0)), dtype=bool)

    rx = width / 2.0
    ry = height / 2.0
    xs = (np.arange(width) + 0.5 - rx) / rx
    ys = (np.arange(height) + 0.5 - ry) / ry
    return (ys[:, None] ** 2 + xs[None, :] ** 2) <= 1.0
