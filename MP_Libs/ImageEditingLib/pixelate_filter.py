"""
Block-average pixelation.

Example:
    >>> from MP_Libs.ImageEditingLib.image_models import new_buffer
    >>> image = new_buffer(640, 480, (10, 20, 30, 255))
    >>> pixelated = pixelate(image, denom=32)   # 20px blocks
"""

import numpy as np

from MP_Libs.ImageEditingLib.image_models import ImageBuffer


def block_size(width: int, height: int, denom: int) -> int:
    """
    Edge length of one pixelation block.

    Args:
        width, height: Image dimensions
        denom: Number of blocks along the longer side (>= 1)

    Returns:
        max(width, height) // denom, which may be 0

    Raises:
        ValueError: If denom < 1
    """
    if denom < 1:
        raise ValueError(f"denom must be >= 1, got {denom}")

    return max(width, height) // denom


def pixelate(image: ImageBuffer, denom: int) -> ImageBuffer:
    """
    Pixelate an image by averaging square blocks.

    The buffer is tiled from the origin with blocks of block_size(); blocks on
    the right and bottom edges are clipped and averaged over the pixels they
    actually contain. R, G and B are averaged independently with truncating
    integer division. Alpha is not averaged: every pixel keeps its own.

    Args:
        image: Source buffer (not modified)
        denom: Number of blocks along the longer side (>= 1)

    Returns:
        New buffer with the same dimensions. If the block size is 0 the
        result is an unmodified copy.

    Raises:
        ValueError: If denom < 1
    """
    height, width = image.shape[:2]
    size = block_size(width, height, denom)

    result = image.copy()
    if size == 0:
        return result

    for top in range(0, height, size):
        for left in range(0, width, size):
            block = result[top:top + size, left:left + size, :3]
            pixels = block.shape[0] * block.shape[1]

            totals = block.sum(axis=(0, 1), dtype=np.int64)
            block[:, :] = (totals // pixels).astype(np.uint8)

    return result
