"""
Application layer wiring editors to the host platform.

Classes:
    PlatformBridge: What the host platform must provide (gallery access)
    NullPlatformBridge: Bridge for hosts without a gallery
    EditorKind: The editors the application can create
    EditorApplication: Creates editors and forwards gallery interaction
"""

from enum import Enum
from typing import Dict, Optional, Protocol, Type, Union
import logging

from MP_Libs.EditorsLib.base_editor import BaseEditor, ImageLoader, ImageSaver
from MP_Libs.EditorsLib.editor_events import IMAGE_SAVED
from MP_Libs.EditorsLib.editor_state import EditorConfig
from MP_Libs.EditorsLib.effect_editors import BlurEditor, PixelateEditor
from MP_Libs.EditorsLib.retouch_editor import RetouchEditor
from MP_Libs.ImageEditingLib.image_editing_ops import PathLike, load_image, save_image

logger = logging.getLogger(__name__)


class PlatformBridge(Protocol):
    def show_gallery(self) -> None:
        ...

    def refresh_gallery(self, path: str) -> None:
        ...


class NullPlatformBridge:
    """Bridge that only logs; used on platforms without a photo gallery."""

    def show_gallery(self) -> None:
        logger.debug("show_gallery() ignored: no platform gallery")

    def refresh_gallery(self, path: str) -> None:
        logger.debug(f"refresh_gallery({path}) ignored: no platform gallery")


class EditorKind(Enum):
    PIXELATE = "pixelate"
    BLUR = "blur"
    RETOUCH = "retouch"


EDITOR_CLASSES: Dict[EditorKind, Type[BaseEditor]] = {
    EditorKind.PIXELATE: PixelateEditor,
    EditorKind.BLUR: BlurEditor,
    EditorKind.RETOUCH: RetouchEditor,
}

AnyEditor = Union[PixelateEditor, BlurEditor, RetouchEditor]


class EditorApplication:
    """
    Owns the active editor and talks to the platform through a bridge.

    Successful saves trigger a gallery refresh for the written file.
    Images picked in the gallery are opened in the active editor.

    Example:
        >>> app = EditorApplication(NullPlatformBridge())
        >>> editor = app.create_editor(EditorKind.PIXELATE)
        >>> app.image_selected("/sdcard/DCIM/photo.jpg")
    """

    def __init__(
        self,
        bridge: PlatformBridge,
        config: Optional[EditorConfig] = None,
        loader: ImageLoader = load_image,
        saver: ImageSaver = save_image,
    ):
        self.bridge = bridge
        self.config = config or EditorConfig()
        self._loader = loader
        self._saver = saver
        self._editor: Optional[AnyEditor] = None

    @property
    def editor(self) -> Optional[AnyEditor]:
        return self._editor

    def create_editor(self, kind: EditorKind) -> AnyEditor:
        """Create a new editor of the given kind, replacing the active one."""
        if self._editor is not None:
            self._editor.close()

        editor_class = EDITOR_CLASSES[kind]
        editor = editor_class(config=self.config, loader=self._loader, saver=self._saver)
        editor.events.subscribe(IMAGE_SAVED, self._image_saved)

        self._editor = editor
        logger.debug(f"Created {kind.value} editor")
        return editor

    def show_gallery(self) -> None:
        self.bridge.show_gallery()

    def image_selected(self, location: PathLike) -> bool:
        """Open an image chosen in the gallery in the active editor."""
        if self._editor is None:
            logger.warning(f"Image selected with no active editor: {location}")
            return False
        return self._editor.open_image(location)

    def image_selection_cancelled(self) -> None:
        logger.debug("Gallery selection cancelled")

    def close(self) -> None:
        if self._editor is not None:
            self._editor.close()
            self._editor = None

    def _image_saved(self, path: PathLike) -> None:
        self.bridge.refresh_gallery(str(path))
