"""
Behaviour shared by every brush editor.

BaseEditor owns the editor state, the undo log, the view/image scale and
the open/save/undo plumbing. Subclasses decide what a press, move or release
does in each of their modes.
"""

from typing import Callable, Optional, Tuple
import logging
import threading

from MP_Libs.EditorsLib.editor_events import (
    BRUSH_EVENT,
    HELPER_IMAGE_READY,
    IMAGE_OPEN_FAILED,
    IMAGE_SAVE_FAILED,
    IMAGE_SAVED,
    UNDO_AVAILABILITY_CHANGED,
    BrushPhase,
    EditorEvents,
)
from MP_Libs.EditorsLib.editor_state import EditorConfig, EditorState
from MP_Libs.ImageEditingLib.image_editing_ops import (
    ImageOpenError,
    ImageSaveError,
    PathLike,
    helper_patch,
    load_image,
    save_image,
)
from MP_Libs.ImageEditingLib.image_models import ImageBuffer, Point
from MP_Libs.ImageEditingLib.undo_log import UndoLog

logger = logging.getLogger(__name__)

ImageLoader = Callable[[PathLike, float], ImageBuffer]
ImageSaver = Callable[[PathLike, ImageBuffer], object]


class BaseEditor:
    """
    Common state and plumbing of the pixelate, blur and retouch editors.

    Pointer coordinates are in view space; set_view_size() tells the editor
    how large the view is so it can map them onto the image. Without a view
    size the view is assumed to match the image one to one.

    Effect-layer results are committed from a worker thread; state swaps,
    undo and brush updates all hold one re-entrant lock.
    """

    def __init__(
        self,
        initial_mode: int,
        config: Optional[EditorConfig] = None,
        events: Optional[EditorEvents] = None,
        loader: ImageLoader = load_image,
        saver: ImageSaver = save_image,
    ):
        self.config = config or EditorConfig()
        self.events = events or EditorEvents()

        self._loader = loader
        self._saver = saver
        self._lock = threading.RLock()
        self._state: Optional[EditorState] = None
        self._mode = initial_mode
        self._helper_size = self.config.helper_size
        self._view_size: Optional[Tuple[float, float]] = None
        self._undo = UndoLog(
            capacity=self.config.undo_depth,
            on_availability_changed=self._publish_undo_availability,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def mode(self) -> int:
        return self._mode

    @mode.setter
    def mode(self, mode: int) -> None:
        self._mode = mode

    @property
    def helper_size(self) -> int:
        return self._helper_size

    @helper_size.setter
    def helper_size(self, size: int) -> None:
        self._helper_size = int(size)

    @property
    def changed(self) -> bool:
        return self._state is not None and self._state.changed

    @property
    def has_image(self) -> bool:
        return self._state is not None

    @property
    def state(self) -> Optional[EditorState]:
        return self._state

    @property
    def current_image(self) -> Optional[ImageBuffer]:
        """Buffer to render; modified in place by brush strokes."""
        return self._state.current if self._state is not None else None

    @property
    def undo_available(self) -> bool:
        return self._undo.available

    # ------------------------------------------------------------------
    # View geometry
    # ------------------------------------------------------------------

    def set_view_size(self, width: float, height: float) -> None:
        """Set the view size; a non-positive dimension clears it."""
        if width <= 0 or height <= 0:
            self._view_size = None
            return
        self._view_size = (float(width), float(height))

    def scale(self) -> float:
        """View pixels per image pixel."""
        state = self._state
        if state is None or state.width == 0 or state.height == 0:
            return 1.0
        if self._view_size is None:
            return 1.0

        view_width, view_height = self._view_size
        return min(view_width / state.width, view_height / state.height)

    def brush_radius(self) -> int:
        """Brush radius in image pixels."""
        return int(self.config.brush_size / self.scale())

    def to_image_point(self, x: float, y: float) -> Point:
        scale = self.scale()
        return Point(int(int(x) / scale), int(int(y) / scale))

    # ------------------------------------------------------------------
    # Open / save / undo
    # ------------------------------------------------------------------

    def open_image(self, location: PathLike) -> bool:
        raise NotImplementedError

    def save_image(self, location: PathLike) -> bool:
        """
        Save the current buffer.

        Publishes image_saved(path) or image_save_failed. On failure the
        editor state is left untouched.

        Returns:
            True if the image was written
        """
        with self._lock:
            if self._state is None:
                logger.warning("Save requested with no image open")
                written = None
                saved = False
            else:
                try:
                    written = self._saver(location, self._state.current)
                    saved = True
                except ImageSaveError as e:
                    logger.warning(f"Could not save image: {e}")
                    saved = False

            if saved:
                self._state.changed = False

        if not saved:
            self.events.publish(IMAGE_SAVE_FAILED)
            return False

        self.events.publish(IMAGE_SAVED, written if written is not None else location)
        return True

    def undo(self) -> None:
        """Restore the most recent snapshot; does nothing if there is none."""
        with self._lock:
            if self._state is None or not self._undo.available:
                return

            self._state.current = self._undo.pop()
            self._state.changed = True

    def close(self) -> None:
        """Release resources held by the editor."""

    # ------------------------------------------------------------------
    # Pointer interface
    # ------------------------------------------------------------------

    def on_pointer_down(self, x: float, y: float) -> None:
        with self._lock:
            handled = self._state is not None and self._handle_press(x, y)
        if handled:
            self._publish_brush_event(BrushPhase.PRESSED, x, y)

    def on_pointer_move(self, x: float, y: float) -> None:
        with self._lock:
            handled = self._state is not None and self._handle_move(x, y)
        if handled:
            self._publish_brush_event(BrushPhase.MOVED, x, y)

    def on_pointer_up(self, x: float, y: float) -> None:
        with self._lock:
            handled = self._state is not None and self._handle_release(x, y)
        if handled:
            self._publish_brush_event(BrushPhase.RELEASED, x, y)

    def _handle_press(self, x: float, y: float) -> bool:
        """Apply a press; return True if it belonged to a brush stroke."""
        return False

    def _handle_move(self, x: float, y: float) -> bool:
        return False

    def _handle_release(self, x: float, y: float) -> bool:
        return False

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    def _load(self, location: PathLike, mpix_limit: float) -> Optional[ImageBuffer]:
        try:
            return self._loader(location, mpix_limit)
        except ImageOpenError as e:
            logger.warning(f"Could not open image: {e}")
            self.events.publish(IMAGE_OPEN_FAILED)
            return None

    def _save_undo_image(self) -> None:
        self._undo.push(self._state.current)

    def _reset_undo(self) -> None:
        """Drop all snapshots and report undo as unavailable."""
        if self._undo.available:
            self._undo.clear()
        else:
            self._publish_undo_availability(False)

    def _finish_stroke_update(self, center: Point) -> None:
        self._state.changed = True
        patch = helper_patch(self._state.current, center, self._helper_size, self.scale())
        self.events.publish(HELPER_IMAGE_READY, patch)

    def _publish_brush_event(self, phase: BrushPhase, x: float, y: float) -> None:
        self.events.publish(BRUSH_EVENT, phase, int(x), int(y))

    def _publish_undo_availability(self, available: bool) -> None:
        self.events.publish(UNDO_AVAILABILITY_CHANGED, available)
