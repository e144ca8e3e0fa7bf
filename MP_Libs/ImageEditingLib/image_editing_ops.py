"""
Core image editing operations for MagicPhotos.

This module provides the image I/O collaborators used by the editors and the
small buffer operations shared between them.

Functions:
    url_to_local_path: Turn a file:// URL or plain path into a Path
    load_image: Decode an image and downsample it to a megapixel ceiling
    normalize_save_path: Force a recognised image suffix onto a save path
    save_image: Encode a buffer to disk
    reveal_layer: Copy a brush disc from a layer into the current buffer
    helper_patch: Build the magnifier patch shown next to the brush

Classes:
    ImageOpenError: Raised when an image cannot be opened
    ImageSaveError: Raised when an image cannot be saved
"""

from pathlib import Path
from typing import Tuple, Union
from urllib.parse import unquote, urlparse
import logging
import math

import numpy as np
from PIL import Image, UnidentifiedImageError

from MP_Libs.ImageEditingLib.brush_mask import disc_mask
from MP_Libs.ImageEditingLib.image_models import (
    ImageBuffer,
    buffer_from_image,
    buffer_to_image,
    new_buffer,
)
from MP_Libs.constants import (
    DEFAULT_JPEG_QUALITY,
    DEFAULT_SAVE_SUFFIX,
    FILE_URL_PREFIX,
    SAVE_FORMATS,
    SUPPORTED_SAVE_SUFFIXES,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ImageOpenError(OSError):
    """Raised when an image file cannot be read or decoded."""


class ImageSaveError(OSError):
    """Raised when an image cannot be encoded or written."""


# ============================================================================
# Loading
# ============================================================================

def url_to_local_path(location: PathLike) -> Path:
    """
    Convert a file:// URL or a plain path into a local Path.

    Raises:
        ImageOpenError: If the location is empty or a non-file URL
    """
    text = str(location).strip()
    if not text:
        raise ImageOpenError("Empty image location")

    if text.startswith(FILE_URL_PREFIX):
        return Path(unquote(urlparse(text).path))

    if "://" in text:
        raise ImageOpenError(f"Not a local file: {text}")

    return Path(text)


def scaled_size(width: int, height: int, mpix_limit: float) -> Tuple[int, int]:
    """
    Size an image must be reduced to so it fits within mpix_limit megapixels.

    Images already within the limit keep their size.
    """
    limit = mpix_limit * 1000000.0
    if width * height <= limit:
        return width, height

    factor = math.sqrt((width * height) / limit)
    return max(1, int(width / factor)), max(1, int(height / factor))


def load_image(location: PathLike, mpix_limit: float) -> ImageBuffer:
    """
    Load an image as an RGBA buffer no larger than mpix_limit megapixels.

    Args:
        location: File path or file:// URL
        mpix_limit: Megapixel ceiling; larger images are downscaled

    Returns:
        Decoded RGBA buffer

    Raises:
        ImageOpenError: If the path is unreadable or the data cannot be decoded
    """
    path = url_to_local_path(location)

    try:
        with Image.open(path) as image:
            target = scaled_size(image.width, image.height, mpix_limit)
            if target != image.size:
                image.draft("RGB", target)
                image = image.resize(target, Image.Resampling.BILINEAR)
            buffer = buffer_from_image(image)
    except (OSError, UnidentifiedImageError, ValueError) as e:
        raise ImageOpenError(f"Could not open image {path}: {e}") from e

    if buffer.size == 0:
        raise ImageOpenError(f"Image has no pixels: {path}")

    logger.debug(f"Loaded {path} as {buffer.shape[1]}x{buffer.shape[0]}")
    return buffer


# ============================================================================
# Saving
# ============================================================================

def normalize_save_path(location: PathLike) -> Path:
    """
    Ensure the save path carries a recognised image suffix.

    A suffix of png, jpg or bmp (any case) is kept; anything else gets
    ".jpg" appended rather than replaced.

    Example:
        >>> normalize_save_path("out")
        PosixPath('out.jpg')
        >>> normalize_save_path("out.PNG")
        PosixPath('out.PNG')
    """
    path = url_to_local_path(location)
    suffix = path.suffix[1:].lower()

    if suffix in SUPPORTED_SAVE_SUFFIXES:
        return path

    return path.with_name(f"{path.name}.{DEFAULT_SAVE_SUFFIX}")


def save_image(location: PathLike, buffer: ImageBuffer) -> Path:
    """
    Encode buffer to location, choosing the format from the suffix.

    The location is passed through normalize_save_path() first. JPEG output
    drops the alpha channel.

    Returns:
        The path actually written

    Raises:
        ImageSaveError: If the buffer is empty or encoding/writing fails
    """
    try:
        path = normalize_save_path(location)
    except ImageOpenError as e:
        raise ImageSaveError(str(e)) from e

    if buffer is None or buffer.size == 0:
        raise ImageSaveError("Nothing to save")

    save_format = SAVE_FORMATS[path.suffix[1:].lower()]
    image = buffer_to_image(buffer)

    kwargs = {"format": save_format}
    if save_format == "JPEG":
        image = image.convert("RGB")
        kwargs["quality"] = DEFAULT_JPEG_QUALITY

    try:
        image.save(path, **kwargs)
    except (OSError, ValueError) as e:
        raise ImageSaveError(f"Could not save image {path}: {e}") from e

    logger.debug(f"Saved {path} as {save_format}")
    return path


# ============================================================================
# Brush helpers
# ============================================================================

def reveal_layer(
    target: ImageBuffer,
    layer: ImageBuffer,
    center: Tuple[int, int],
    radius: int,
) -> None:
    """
    Copy the brush disc around center from layer into target, in place.

    Both buffers must have the same dimensions. Pixels outside the buffer
    are skipped.
    """
    height, width = target.shape[:2]

    left = max(center[0] - radius, 0)
    top = max(center[1] - radius, 0)
    right = min(center[0] + radius + 1, width)
    bottom = min(center[1] + radius + 1, height)
    if right <= left or bottom <= top:
        return

    mask = disc_mask(center, radius, left, top, right - left, bottom - top)
    region = target[top:bottom, left:right]
    region[mask] = layer[top:bottom, left:right][mask]


def helper_patch(
    image: ImageBuffer,
    center: Tuple[int, int],
    helper_size: int,
    scale: float,
) -> ImageBuffer:
    """
    Crop the area under the brush and scale it to helper_size pixels.

    The crop is helper_size / scale image pixels square, centered on center.
    Parts of the crop outside the image are transparent black.

    Args:
        image: Current buffer
        center: Brush center (image space)
        helper_size: Edge of the returned patch in view pixels
        scale: View/image scale factor

    Returns:
        A helper_size x helper_size buffer, or an empty buffer when the
        crop would be smaller than one pixel
    """
    crop_size = int(helper_size / scale)
    if helper_size <= 0 or crop_size <= 0:
        return new_buffer(0, 0)

    height, width = image.shape[:2]
    left = int(center[0] - (helper_size / scale) / 2)
    top = int(center[1] - (helper_size / scale) / 2)

    crop = new_buffer(crop_size, crop_size)
    src_left, src_top = max(left, 0), max(top, 0)
    src_right = min(left + crop_size, width)
    src_bottom = min(top + crop_size, height)

    if src_right > src_left and src_bottom > src_top:
        crop[src_top - top:src_bottom - top, src_left - left:src_right - left] = \
            image[src_top:src_bottom, src_left:src_right]

    if crop_size == helper_size:
        return crop

    scaled = buffer_to_image(crop).resize((helper_size, helper_size), Image.Resampling.NEAREST)
    return np.array(scaled, dtype=np.uint8)
