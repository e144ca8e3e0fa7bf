"""
ImageEditingLib - Core image editing functionality

This module provides the pixel-level effects, brush geometry, undo history
and image I/O used by the MagicPhotos editors.
"""

from MP_Libs.ImageEditingLib.image_models import (
    ImageBuffer,
    Point,
    Rect,
    RgbaColor,
    buffer_from_image,
    buffer_to_image,
    new_buffer,
)
from MP_Libs.ImageEditingLib.brush_mask import disc_mask, ellipse_mask, in_brush
from MP_Libs.ImageEditingLib.undo_log import EmptyUndoLogError, UndoLog
from MP_Libs.ImageEditingLib.pixelate_filter import pixelate
from MP_Libs.ImageEditingLib.blur_filter import apply_local_blur, blur_channels, box_blur
from MP_Libs.ImageEditingLib.clone_stamp import clone_stamp, sampling_point_for_drag
from MP_Libs.ImageEditingLib.image_editing_ops import (
    ImageOpenError,
    ImageSaveError,
    helper_patch,
    load_image,
    normalize_save_path,
    reveal_layer,
    save_image,
)

__all__ = [
    "ImageBuffer",
    "Point",
    "Rect",
    "RgbaColor",
    "buffer_from_image",
    "buffer_to_image",
    "new_buffer",
    "disc_mask",
    "ellipse_mask",
    "in_brush",
    "EmptyUndoLogError",
    "UndoLog",
    "pixelate",
    "apply_local_blur",
    "blur_channels",
    "box_blur",
    "clone_stamp",
    "sampling_point_for_drag",
    "ImageOpenError",
    "ImageSaveError",
    "helper_patch",
    "load_image",
    "normalize_save_path",
    "reveal_layer",
    "save_image",
]
