"""
Constants and configuration values for MagicPhotos.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the editing core.
"""

# Undo / brush
UNDO_DEPTH = 4
BRUSH_SIZE = 16

# Effect parameters
RETOUCH_GAUSSIAN_RADIUS = 4
DEFAULT_GAUSSIAN_RADIUS = 4
DEFAULT_PIXEL_DENOM = 32
DEFAULT_HELPER_SIZE = 0

# Box blur calibration table, indexed by radius - 1
BLUR_ALPHA_TABLE = (14, 10, 8, 6, 5, 5, 4, 3, 3, 3, 3, 2, 2, 2, 2, 2, 2)
BLUR_ALPHA_IDENTITY = 16
BLUR_ALPHA_MAX_SMOOTHING = 1

# Megapixel ceilings applied on load
EDITOR_MPIX_LIMIT = 1.0
PREVIEW_MPIX_LIMIT = 0.2

# File naming
SUPPORTED_SAVE_SUFFIXES = {"png", "jpg", "bmp"}
DEFAULT_SAVE_SUFFIX = "jpg"
FILE_URL_PREFIX = "file://"

# Pillow save formats keyed by lowercase suffix
SAVE_FORMATS = {
    "png": "PNG",
    "jpg": "JPEG",
    "bmp": "BMP",
}
DEFAULT_JPEG_QUALITY = 95

# Effect generator worker
GENERATOR_THREAD_PREFIX = "effect-generator"
