"""
Retouch editor: clone stamp and local blur brushes.

Modes:
    SCROLL: Pointer events are ignored
    SAMPLING_POINT: Pressing or dragging picks the clone source
    CLONE: Strokes copy from the sampling point, which follows the stroke
    BLUR: Strokes blur the area under the brush
"""

from typing import Optional
import logging

from MP_Libs.EditorsLib.base_editor import BaseEditor, ImageLoader, ImageSaver
from MP_Libs.EditorsLib.editor_events import (
    IMAGE_OPENED,
    SAMPLING_POINT_CHANGED,
    SAMPLING_POINT_VALID_CHANGED,
    EditorEvents,
)
from MP_Libs.EditorsLib.editor_state import (
    EditOperation,
    EditorConfig,
    EditorState,
    RetouchMode,
    SamplingState,
)
from MP_Libs.ImageEditingLib.blur_filter import apply_local_blur
from MP_Libs.ImageEditingLib.clone_stamp import (
    clamp_point,
    clone_stamp,
    sampling_point_for_drag,
)
from MP_Libs.ImageEditingLib.image_editing_ops import PathLike, load_image, save_image
from MP_Libs.ImageEditingLib.image_models import Point

logger = logging.getLogger(__name__)

MODE_OPERATIONS = {
    RetouchMode.CLONE: EditOperation.CLONE_COPY,
    RetouchMode.BLUR: EditOperation.LOCAL_BLUR,
}


class RetouchEditor(BaseEditor):
    """
    Brush editor for clone-stamp and local blur retouching.

    Opening an image is synchronous: image_opened is published before
    open_image() returns.
    """

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        events: Optional[EditorEvents] = None,
        loader: ImageLoader = load_image,
        saver: ImageSaver = save_image,
    ):
        super().__init__(RetouchMode.SCROLL, config, events, loader, saver)

        self.gaussian_radius = self.config.retouch_gaussian_radius
        self._sampling = SamplingState()

    @property
    def operation(self) -> Optional[EditOperation]:
        """Edit performed by strokes in the current mode, if any."""
        return MODE_OPERATIONS.get(self._mode)

    @property
    def sampling_point(self) -> Optional[Point]:
        return self._sampling.sampling_point

    @property
    def sampling_point_valid(self) -> bool:
        return self._sampling.sampling_point is not None

    def open_image(self, location: PathLike) -> bool:
        """
        Load an image for retouching, replacing any previous one.

        Returns:
            True if the image was opened
        """
        buffer = self._load(location, self.config.mpix_limit)
        if buffer is None:
            return False

        with self._lock:
            self._state = EditorState(original=buffer, current=buffer.copy())
            self._sampling = SamplingState()
            self._reset_undo()

        self.events.publish(SAMPLING_POINT_VALID_CHANGED, False)
        self.events.publish(IMAGE_OPENED)
        return True

    # ------------------------------------------------------------------
    # Pointer handling
    # ------------------------------------------------------------------

    def _handle_press(self, x: float, y: float) -> bool:
        if self._mode == RetouchMode.SAMPLING_POINT:
            self._pick_sampling_point(x, y)
            return False

        if self._mode == RetouchMode.CLONE:
            if not self.sampling_point_valid:
                return False

            self._sampling.initial_sampling_point = self._sampling.sampling_point
            self._sampling.initial_touch_point = Point(int(x), int(y))
            self._change_image_at(x, y, save_undo=True)
            return True

        if self._mode == RetouchMode.BLUR:
            self._change_image_at(x, y, save_undo=True)
            self._sampling.last_blur_point = self.to_image_point(x, y)
            return True

        return False

    def _handle_move(self, x: float, y: float) -> bool:
        if self._mode == RetouchMode.SAMPLING_POINT:
            self._pick_sampling_point(x, y)
            return False

        if self._mode == RetouchMode.CLONE:
            if not self.sampling_point_valid:
                return False

            self._sampling.sampling_point = sampling_point_for_drag(
                self._sampling.initial_sampling_point,
                self._sampling.initial_touch_point,
                (x, y),
                self.scale(),
                self._state.width,
                self._state.height,
            )
            self.events.publish(SAMPLING_POINT_CHANGED, self._sampling.sampling_point)

            self._change_image_at(x, y, save_undo=False)
            return True

        if self._mode == RetouchMode.BLUR:
            self._change_image_at(x, y, save_undo=False)
            self._sampling.last_blur_point = self.to_image_point(x, y)
            return True

        return False

    def _handle_release(self, x: float, y: float) -> bool:
        if self._mode == RetouchMode.CLONE:
            return True

        if self._mode == RetouchMode.BLUR:
            self._sampling.last_blur_point = None
            return True

        return False

    def _pick_sampling_point(self, x: float, y: float) -> None:
        scale = self.scale()
        point = clamp_point(int(x / scale), int(y / scale), self._state.width, self._state.height)

        self._sampling.sampling_point = point

        self.events.publish(SAMPLING_POINT_VALID_CHANGED, True)
        self.events.publish(SAMPLING_POINT_CHANGED, point)

    def _change_image_at(self, x: float, y: float, save_undo: bool) -> None:
        if save_undo:
            self._save_undo_image()

        center = self.to_image_point(x, y)
        radius = self.brush_radius()

        if self._mode == RetouchMode.CLONE:
            clone_stamp(self._state.current, self._sampling.sampling_point, center, radius)
        else:
            apply_local_blur(
                self._state.current,
                center,
                radius,
                self.gaussian_radius,
                last_center=self._sampling.last_blur_point,
            )

        self._finish_stroke_update(center)
