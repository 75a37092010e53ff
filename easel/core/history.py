from __future__ import annotations

import logging
from collections import deque

from easel.core.scene import Scene, Snapshot


logger = logging.getLogger(__name__)

HISTORY_CAPACITY = 30


class HistoryManager:
    """Bounded stack of scene snapshots.

    Callers take a snapshot *before* the mutation they want to be able to
    undo; nothing is recorded automatically.
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        self.capacity = capacity
        self.undo_stack: deque[Snapshot] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self.undo_stack)

    @property
    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    def clear(self):
        self.undo_stack.clear()

    def snapshot(self, scene: Scene):
        """
        Pushes a copy of the scene, evicting the oldest entry when full.
        """
        self.undo_stack.append(scene.snapshot())

    def undo(self, scene: Scene) -> bool:
        """
        Restores the most recent snapshot into *scene* and clears the selection.
        Returns False when there is nothing to undo.
        """
        if not self.undo_stack:
            logger.debug("Nothing to undo")
            return False
        scene.restore(self.undo_stack.pop())
        return True
