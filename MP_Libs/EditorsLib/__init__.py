"""
EditorsLib - Interactive editors

This module provides the pixelate, blur and retouch brush editors, the
effect previews, the asynchronous effect coordinator and the event surface
the editors report through.
"""

from MP_Libs.EditorsLib.editor_events import BrushPhase, EditorEvents
from MP_Libs.EditorsLib.editor_state import (
    EditOperation,
    EditorConfig,
    EditorState,
    EffectMode,
    RetouchMode,
)
from MP_Libs.EditorsLib.effect_coordinator import (
    EffectCoordinator,
    GenerationRequest,
    GenerationResult,
    GenerationState,
)
from MP_Libs.EditorsLib.effect_editors import BlurEditor, PixelateEditor
from MP_Libs.EditorsLib.retouch_editor import RetouchEditor
from MP_Libs.EditorsLib.preview_generators import (
    BlurPreviewGenerator,
    PixelatePreviewGenerator,
)
from MP_Libs.EditorsLib.application import (
    EditorApplication,
    EditorKind,
    NullPlatformBridge,
    PlatformBridge,
)

__all__ = [
    "BrushPhase",
    "EditorEvents",
    "EditOperation",
    "EditorConfig",
    "EditorState",
    "EffectMode",
    "RetouchMode",
    "EffectCoordinator",
    "GenerationRequest",
    "GenerationResult",
    "GenerationState",
    "BlurEditor",
    "PixelateEditor",
    "RetouchEditor",
    "BlurPreviewGenerator",
    "PixelatePreviewGenerator",
    "EditorApplication",
    "EditorKind",
    "NullPlatformBridge",
    "PlatformBridge",
]
