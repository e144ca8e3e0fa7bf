"""
Bounded undo history of full-frame snapshots.

Classes:
    UndoLog: LIFO of ImageBuffer snapshots with a fixed capacity
    EmptyUndoLogError: Raised when popping from an empty log
"""

from typing import Callable, List, Optional
import logging

from MP_Libs.ImageEditingLib.image_models import ImageBuffer
from MP_Libs.constants import UNDO_DEPTH

logger = logging.getLogger(__name__)

AvailabilityCallback = Callable[[bool], None]


class EmptyUndoLogError(IndexError):
    """Raised by UndoLog.pop() when there is nothing to undo."""


class UndoLog:
    """
    Bounded LIFO of image snapshots, most recent last.

    Pushing past capacity evicts the oldest snapshots. The optional
    availability callback fires with True when the log becomes non-empty
    and with False when it becomes empty.

    Example:
        >>> log = UndoLog(capacity=4, on_availability_changed=print)
        >>> log.push(buffer)       # prints True
        >>> restored = log.pop()   # prints False
    """

    def __init__(
        self,
        capacity: int = UNDO_DEPTH,
        on_availability_changed: Optional[AvailabilityCallback] = None,
    ):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")

        self._capacity = capacity
        self._snapshots: List[ImageBuffer] = []
        self._on_availability_changed = on_availability_changed

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def available(self) -> bool:
        """True when pop() would succeed."""
        return bool(self._snapshots)

    def __len__(self) -> int:
        return len(self._snapshots)

    def push(self, snapshot: ImageBuffer) -> None:
        """Store a copy of snapshot, evicting the oldest entries over capacity."""
        was_empty = not self._snapshots

        self._snapshots.append(snapshot.copy())

        if len(self._snapshots) > self._capacity:
            del self._snapshots[:len(self._snapshots) - self._capacity]

        if was_empty:
            self._notify(True)

    def pop(self) -> ImageBuffer:
        """
        Remove and return the most recent snapshot.

        Raises:
            EmptyUndoLogError: If the log is empty
        """
        if not self._snapshots:
            raise EmptyUndoLogError("undo log is empty")

        snapshot = self._snapshots.pop()

        if not self._snapshots:
            self._notify(False)

        return snapshot

    def clear(self) -> None:
        had_entries = bool(self._snapshots)
        self._snapshots.clear()

        if had_entries:
            self._notify(False)

    def _notify(self, available: bool) -> None:
        logger.debug(f"Undo availability changed: {available}")
        if self._on_availability_changed is not None:
            self._on_availability_changed(available)
