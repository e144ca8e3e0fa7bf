"""
Editor state and configuration models.

Classes:
    EffectMode: Brush modes of the pixelate and blur editors
    RetouchMode: Brush modes of the retouch editor
    EditOperation: The local edit a brush stroke performs
    EditorConfig: Per-editor defaults
    EditorState: Buffers and flags of the image being edited
    SamplingState: Clone / blur stroke tracking of the retouch editor
"""

from dataclasses import asdict, dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, Optional

from MP_Libs.ImageEditingLib.image_models import ImageBuffer, Point
from MP_Libs.constants import (
    BRUSH_SIZE,
    DEFAULT_GAUSSIAN_RADIUS,
    DEFAULT_HELPER_SIZE,
    DEFAULT_PIXEL_DENOM,
    EDITOR_MPIX_LIMIT,
    PREVIEW_MPIX_LIMIT,
    RETOUCH_GAUSSIAN_RADIUS,
    UNDO_DEPTH,
)


class EffectMode(IntEnum):
    SCROLL = 0
    ORIGINAL = 1
    EFFECTED = 2


class RetouchMode(IntEnum):
    SCROLL = 0
    SAMPLING_POINT = 1
    CLONE = 2
    BLUR = 3


class EditOperation(Enum):
    REVEAL_LAYER = "reveal_layer"
    LOCAL_BLUR = "local_blur"
    CLONE_COPY = "clone_copy"


@dataclass
class EditorConfig:
    """Configuration shared by all editors.

    Attributes:
        helper_size: Edge of the magnifier patch in view pixels (0 = none)
        brush_size: Brush radius in view pixels
        undo_depth: Undo log capacity
        mpix_limit: Megapixel ceiling for opened images
        preview_mpix_limit: Megapixel ceiling for preview generators
        pixel_denom: Pixelation blocks along the longer side
        gaussian_radius: Radius of the full-image blur effect
        retouch_gaussian_radius: Radius of the retouch blur brush
    """
    helper_size: int = DEFAULT_HELPER_SIZE
    brush_size: int = BRUSH_SIZE
    undo_depth: int = UNDO_DEPTH
    mpix_limit: float = EDITOR_MPIX_LIMIT
    preview_mpix_limit: float = PREVIEW_MPIX_LIMIT
    pixel_denom: int = DEFAULT_PIXEL_DENOM
    gaussian_radius: int = DEFAULT_GAUSSIAN_RADIUS
    retouch_gaussian_radius: int = RETOUCH_GAUSSIAN_RADIUS

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorConfig":
        """Create from dictionary, ignoring unknown keys."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)


@dataclass
class EditorState:
    """Buffers of the currently open image.

    original is never modified after load; effected exists only for
    effect-layer editors; current is what the host renders and what brush
    strokes modify.
    """
    original: ImageBuffer
    current: ImageBuffer
    effected: Optional[ImageBuffer] = None
    changed: bool = False

    @property
    def width(self) -> int:
        return self.current.shape[1]

    @property
    def height(self) -> int:
        return self.current.shape[0]


@dataclass
class SamplingState:
    sampling_point: Optional[Point] = None
    initial_sampling_point: Optional[Point] = None
    initial_touch_point: Optional[Point] = None
    last_blur_point: Optional[Point] = None
