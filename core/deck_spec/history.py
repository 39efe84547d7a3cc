"""Undo/redo history of deck spec snapshots."""

import logging
import threading
from typing import List, Optional

from .types import DeckSpec

logger = logging.getLogger(__name__)


class SpecHistory:
    """Linear undo stack of immutable spec snapshots.

    Snapshots are stored as serialized documents, so later mutation of a
    pushed DeckSpec never changes history. Pushing after an undo discards
    the redo tail.
    """

    def __init__(self, max_entries: int = 50):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._snapshots: List[dict] = []
        self._index = -1
        self._lock = threading.Lock()

    @property
    def index(self) -> int:
        """Cursor position; -1 when empty."""
        return self._index

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1

    def push(self, spec: DeckSpec) -> None:
        """Record a new snapshot at the cursor."""
        snapshot = spec.to_dict()
        with self._lock:
            if self._index >= 0 and self._snapshots[self._index] == snapshot:
                return

            dropped = len(self._snapshots) - (self._index + 1)
            del self._snapshots[self._index + 1:]
            if dropped:
                logger.debug(f"Discarded {dropped} redo snapshot(s)")

            self._snapshots.append(snapshot)
            if len(self._snapshots) > self.max_entries:
                self._snapshots.pop(0)
            self._index = len(self._snapshots) - 1

    def current(self) -> Optional[DeckSpec]:
        """Spec at the cursor, or None if nothing was pushed."""
        with self._lock:
            if self._index < 0:
                return None
            return DeckSpec.from_dict(self._snapshots[self._index])

    def undo(self) -> Optional[DeckSpec]:
        """Move the cursor back and return that spec (None at the start)."""
        with self._lock:
            if self._index <= 0:
                return None
            self._index -= 1
            return DeckSpec.from_dict(self._snapshots[self._index])

    def redo(self) -> Optional[DeckSpec]:
        """Move the cursor forward and return that spec (None at the end)."""
        with self._lock:
            if self._index >= len(self._snapshots) - 1:
                return None
            self._index += 1
            return DeckSpec.from_dict(self._snapshots[self._index])

    def clear(self) -> None:
        with self._lock:
            self._snapshots.clear()
            self._index = -1
