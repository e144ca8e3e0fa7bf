"""
Full-image effect previews.

A preview generator loads a reduced copy of an image and keeps a preview of
the effect up to date as the effect parameter changes. Every parameter
change goes through the generator's EffectCoordinator, so dragging a slider
never runs more than one computation at a time.

Classes:
    PreviewGenerator: Shared implementation
    PixelatePreviewGenerator: Previews pixelation
    BlurPreviewGenerator: Previews the box blur
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional
import logging

from MP_Libs.EditorsLib.base_editor import ImageLoader
from MP_Libs.EditorsLib.editor_events import (
    GENERATION_FINISHED,
    GENERATION_STARTED,
    IMAGE_OPEN_FAILED,
    IMAGE_OPENED,
    EditorEvents,
)
from MP_Libs.EditorsLib.editor_state import EditorConfig
from MP_Libs.EditorsLib.effect_coordinator import (
    EffectCoordinator,
    EffectFunction,
    GenerationRequest,
    GenerationResult,
)
from MP_Libs.ImageEditingLib.blur_filter import box_blur
from MP_Libs.ImageEditingLib.image_editing_ops import ImageOpenError, PathLike, load_image
from MP_Libs.ImageEditingLib.image_models import ImageBuffer
from MP_Libs.ImageEditingLib.pixelate_filter import pixelate

logger = logging.getLogger(__name__)


class PreviewGenerator:
    """
    Keeps an effect preview of a downscaled image current.

    Events:
        image_opened / image_open_failed: After open_image()
        generation_started: A computation began
        generation_finished: preview_image was replaced
    """

    def __init__(
        self,
        effect: EffectFunction,
        effect_param: Any,
        config: Optional[EditorConfig] = None,
        events: Optional[EditorEvents] = None,
        loader: ImageLoader = load_image,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.config = config or EditorConfig()
        self.events = events or EditorEvents()

        self._loader = loader
        self._effect_param = effect_param
        self._loaded: Optional[ImageBuffer] = None
        self._preview: Optional[ImageBuffer] = None
        self._coordinator = EffectCoordinator(
            effect,
            on_result=self._preview_ready,
            on_started=self._generation_started,
            executor=executor,
        )

    @property
    def effect_param(self) -> Any:
        return self._effect_param

    @effect_param.setter
    def effect_param(self, value: Any) -> None:
        self._effect_param = value

        if self._loaded is not None:
            self._coordinator.submit(value, self._loaded)

    @property
    def preview_image(self) -> Optional[ImageBuffer]:
        return self._preview

    @property
    def generating(self) -> bool:
        return self._coordinator.is_running

    def open_image(self, location: PathLike) -> bool:
        """
        Load an image and generate its first preview.

        Returns:
            True if the image was loaded
        """
        try:
            buffer = self._loader(location, self.config.preview_mpix_limit)
        except ImageOpenError as e:
            logger.warning(f"Could not open image for preview: {e}")
            self.events.publish(IMAGE_OPEN_FAILED)
            return False

        self._loaded = buffer
        self.events.publish(IMAGE_OPENED)

        self._coordinator.submit(self._effect_param, buffer)
        return True

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until no preview generation is running or pending."""
        return self._coordinator.wait_until_idle(timeout)

    def close(self) -> None:
        self._coordinator.shutdown(wait=True)

    def _generation_started(self, request: GenerationRequest) -> None:
        self.events.publish(GENERATION_STARTED)

    def _preview_ready(self, result: GenerationResult) -> None:
        self._preview = result.image
        self.events.publish(GENERATION_FINISHED)


class PixelatePreviewGenerator(PreviewGenerator):

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        events: Optional[EditorEvents] = None,
        loader: ImageLoader = load_image,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        config = config or EditorConfig()
        super().__init__(pixelate, config.pixel_denom, config, events, loader, executor)

    @property
    def pixel_denom(self) -> int:
        return self.effect_param

    @pixel_denom.setter
    def pixel_denom(self, denom: int) -> None:
        self.effect_param = int(denom)


class BlurPreviewGenerator(PreviewGenerator):

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        events: Optional[EditorEvents] = None,
        loader: ImageLoader = load_image,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        config = config or EditorConfig()
        super().__init__(box_blur, config.gaussian_radius, config, events, loader, executor)

    @property
    def radius(self) -> int:
        return self.effect_param

    @radius.setter
    def radius(self, radius: int) -> None:
        self.effect_param = int(radius)
