"""
Image editing data models for MagicPhotos.

This module defines core data structures used throughout the editing core.

Classes:
    Point: Integer image- or view-space coordinate pair
    Rect: Axis-aligned integer rectangle (left, top, width, height)

Functions:
    new_buffer: Allocate a buffer filled with one color
    buffer_from_image: Convert a PIL Image into an ImageBuffer
    buffer_to_image: Convert an ImageBuffer back into a PIL Image

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
    ImageBuffer: A (height, width, 4) uint8 numpy array holding RGBA samples
"""

from typing import Any, NamedTuple, Tuple

import numpy as np
from PIL import Image

RgbaColor = Tuple[int, int, int, int]
ImageBuffer = np.ndarray

CHANNELS = 4


class Point(NamedTuple):
    x: int
    y: int


class Rect(NamedTuple):
    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        """Exclusive right edge."""
        return self.left + self.width

    @property
    def bottom(self) -> int:
        """Exclusive bottom edge."""
        return self.top + self.height

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


def new_buffer(width: int, height: int, color: RgbaColor = (0, 0, 0, 0)) -> ImageBuffer:
    """
    Allocate a buffer of the given size filled with a single color.

    Args:
        width: Buffer width in pixels (>= 0)
        height: Buffer height in pixels (>= 0)
        color: RGBA fill color

    Returns:
        A new (height, width, 4) uint8 array

    Raises:
        ValueError: If a dimension is negative
    """
    if width < 0 or height < 0:
        raise ValueError(f"Buffer dimensions must be >= 0, got {width}x{height}")

    buffer = np.empty((height, width, CHANNELS), dtype=np.uint8)
    buffer[:, :] = color
    return buffer


def buffer_from_image(image: Any) -> ImageBuffer:
    """
    Convert a PIL Image into an RGBA ImageBuffer.

    Args:
        image: PIL Image in any mode

    Returns:
        A new (height, width, 4) uint8 array

    Raises:
        TypeError: If image is not a PIL Image
    """
    if not hasattr(image, "convert"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    rgba = image if image.mode == "RGBA" else image.convert("RGBA")
    return np.array(rgba, dtype=np.uint8)


def buffer_to_image(buffer: ImageBuffer) -> Any:
    """Convert an ImageBuffer into a new RGBA PIL Image."""
    return Image.fromarray(np.ascontiguousarray(buffer, dtype=np.uint8))
