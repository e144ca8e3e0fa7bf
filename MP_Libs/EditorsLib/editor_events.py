"""
Event surface of the editors.

Editors publish named events on an EditorEvents hub; hosts subscribe
callbacks to the topics they care about.

Example:
    >>> events = EditorEvents()
    >>> events.subscribe(IMAGE_OPENED, lambda: print("opened"))
    >>> events.publish(IMAGE_OPENED)
    opened
"""

from enum import IntEnum
from typing import Any, Callable, Dict, List
import logging

logger = logging.getLogger(__name__)

EventCallback = Callable[..., Any]

# Topics
IMAGE_OPENED = "image_opened"
IMAGE_OPEN_FAILED = "image_open_failed"
IMAGE_SAVED = "image_saved"
IMAGE_SAVE_FAILED = "image_save_failed"
UNDO_AVAILABILITY_CHANGED = "undo_availability_changed"
HELPER_IMAGE_READY = "helper_image_ready"
GENERATION_STARTED = "generation_started"
GENERATION_FINISHED = "generation_finished"
BRUSH_EVENT = "brush_event"
SAMPLING_POINT_CHANGED = "sampling_point_changed"
SAMPLING_POINT_VALID_CHANGED = "sampling_point_valid_changed"

TOPICS = frozenset({
    IMAGE_OPENED,
    IMAGE_OPEN_FAILED,
    IMAGE_SAVED,
    IMAGE_SAVE_FAILED,
    UNDO_AVAILABILITY_CHANGED,
    HELPER_IMAGE_READY,
    GENERATION_STARTED,
    GENERATION_FINISHED,
    BRUSH_EVENT,
    SAMPLING_POINT_CHANGED,
    SAMPLING_POINT_VALID_CHANGED,
})


class BrushPhase(IntEnum):
    PRESSED = 0
    MOVED = 1
    RELEASED = 2


class EditorEvents:
    """
    Topic-based publish/subscribe hub.

    Callbacks run synchronously, in subscription order, on the thread that
    publishes. Generation results are published from the effect worker.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[EventCallback]] = {}

    def subscribe(self, topic: str, callback: EventCallback) -> None:
        """
        Register callback for topic.

        Raises:
            ValueError: If topic is unknown or callback is not callable
        """
        if topic not in TOPICS:
            raise ValueError(f"Unknown event topic: {topic}")

        if not callable(callback):
            raise ValueError(f"callback must be callable, got {type(callback)}")

        self._subscribers.setdefault(topic, []).append(callback)

    def unsubscribe(self, topic: str, callback: EventCallback) -> bool:
        """Remove callback from topic; returns False if it was not subscribed."""
        callbacks = self._subscribers.get(topic, [])
        if callback in callbacks:
            callbacks.remove(callback)
            return True
        return False

    def publish(self, topic: str, *args: Any) -> None:
        logger.debug(f"Publishing {topic}")
        for callback in list(self._subscribers.get(topic, [])):
            callback(*args)
