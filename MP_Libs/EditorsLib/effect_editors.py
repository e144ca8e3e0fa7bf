"""
Effect-layer editors: pixelate and blur.

On open, the loaded image is handed to an EffectCoordinator that computes
the effect layer off the interactive thread. When the layer arrives the
editor shows it, and brush strokes then reveal either the original or the
effect layer under the brush.

Classes:
    EffectLayerEditor: Shared implementation
    PixelateEditor: Block-average effect layer
    BlurEditor: Box-blur effect layer
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional
import logging

from MP_Libs.EditorsLib.base_editor import BaseEditor, ImageLoader, ImageSaver
from MP_Libs.EditorsLib.editor_events import (
    GENERATION_FINISHED,
    GENERATION_STARTED,
    IMAGE_OPENED,
    EditorEvents,
)
from MP_Libs.EditorsLib.editor_state import (
    EditOperation,
    EditorConfig,
    EditorState,
    EffectMode,
)
from MP_Libs.EditorsLib.effect_coordinator import (
    EffectCoordinator,
    EffectFunction,
    GenerationRequest,
    GenerationResult,
)
from MP_Libs.ImageEditingLib.blur_filter import box_blur
from MP_Libs.ImageEditingLib.image_editing_ops import (
    PathLike,
    load_image,
    reveal_layer,
    save_image,
)
from MP_Libs.ImageEditingLib.image_models import ImageBuffer
from MP_Libs.ImageEditingLib.pixelate_filter import pixelate

logger = logging.getLogger(__name__)


class EffectLayerEditor(BaseEditor):
    """
    Editor whose brush reveals a precomputed full-image effect.

    Modes:
        SCROLL: Pointer events are ignored
        ORIGINAL: The brush paints the original image back
        EFFECTED: The brush paints the effect layer

    The effect parameter may be changed at any time. While the effect
    layer of a freshly opened image is still being generated, a change
    is coalesced into the running generation; otherwise it applies to the
    next image opened.

    Effect-layer results arrive on the coordinator's worker thread, and
    image_opened is published from there.
    """

    operation = EditOperation.REVEAL_LAYER

    def __init__(
        self,
        effect: EffectFunction,
        effect_param: Any,
        config: Optional[EditorConfig] = None,
        events: Optional[EditorEvents] = None,
        loader: ImageLoader = load_image,
        saver: ImageSaver = save_image,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        super().__init__(EffectMode.SCROLL, config, events, loader, saver)

        self._effect_param = effect_param
        self._loaded: Optional[ImageBuffer] = None
        self._coordinator = EffectCoordinator(
            effect,
            on_result=self._effected_image_ready,
            on_started=self._generation_started,
            executor=executor,
        )

    @property
    def effect_param(self) -> Any:
        return self._effect_param

    @effect_param.setter
    def effect_param(self, value: Any) -> None:
        self._effect_param = value

        if self._loaded is not None and self._coordinator.is_running:
            self._coordinator.submit(value, self._loaded)

    @property
    def effected_image(self) -> Optional[ImageBuffer]:
        return self._state.effected if self._state is not None else None

    @property
    def original_image(self) -> Optional[ImageBuffer]:
        return self._state.original if self._state is not None else None

    @property
    def generating(self) -> bool:
        return self._coordinator.is_running

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until no effect generation is running."""
        return self._coordinator.wait_until_idle(timeout)

    def open_image(self, location: PathLike) -> bool:
        """
        Load an image and start generating its effect layer.

        image_opened is published once the layer is ready; image_open_failed
        is published immediately if loading fails.

        Returns:
            True if the image was loaded and generation requested
        """
        buffer = self._load(location, self.config.mpix_limit)
        if buffer is None:
            return False

        self._loaded = buffer
        self._coordinator.submit(self._effect_param, buffer)
        return True

    def close(self) -> None:
        self._coordinator.shutdown(wait=True)

    def _generation_started(self, request: GenerationRequest) -> None:
        self.events.publish(GENERATION_STARTED)

    def _effected_image_ready(self, result: GenerationResult) -> None:
        effected = result.image
        state = EditorState(
            original=result.request.source,
            effected=effected,
            current=effected.copy(),
            changed=True,
        )

        # Waits for any stroke update in progress on the interactive thread
        with self._lock:
            self._state = state
            self._reset_undo()

        self.events.publish(GENERATION_FINISHED)
        self.events.publish(IMAGE_OPENED)

    def _brush_active(self) -> bool:
        return self._mode in (EffectMode.ORIGINAL, EffectMode.EFFECTED)

    def _handle_press(self, x: float, y: float) -> bool:
        if not self._brush_active():
            return False
        self._change_image_at(x, y, save_undo=True)
        return True

    def _handle_move(self, x: float, y: float) -> bool:
        if not self._brush_active():
            return False
        self._change_image_at(x, y, save_undo=False)
        return True

    def _handle_release(self, x: float, y: float) -> bool:
        return self._brush_active()

    def _change_image_at(self, x: float, y: float, save_undo: bool) -> None:
        if save_undo:
            self._save_undo_image()

        center = self.to_image_point(x, y)
        layer = self._state.original if self._mode == EffectMode.ORIGINAL else self._state.effected

        reveal_layer(self._state.current, layer, center, self.brush_radius())
        self._finish_stroke_update(center)


class PixelateEditor(EffectLayerEditor):
    """Brush editor over a block-average pixelation layer."""

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        events: Optional[EditorEvents] = None,
        loader: ImageLoader = load_image,
        saver: ImageSaver = save_image,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        config = config or EditorConfig()
        super().__init__(pixelate, config.pixel_denom, config, events, loader, saver, executor)

    @property
    def pixel_denom(self) -> int:
        return self.effect_param

    @pixel_denom.setter
    def pixel_denom(self, denom: int) -> None:
        self.effect_param = int(denom)


class BlurEditor(EffectLayerEditor):
    """Brush editor over a four-pass box blur layer."""

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        events: Optional[EditorEvents] = None,
        loader: ImageLoader = load_image,
        saver: ImageSaver = save_image,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        config = config or EditorConfig()
        super().__init__(box_blur, config.gaussian_radius, config, events, loader, saver, executor)

    @property
    def radius(self) -> int:
        return self.effect_param

    @radius.setter
    def radius(self, radius: int) -> None:
        self.effect_param = int(radius)
