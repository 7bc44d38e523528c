"""Drag-and-drop reordering of top-level work items."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .entity_store import EntityStore

logger = logging.getLogger(__name__)


class DragPhase(str, Enum):
    """Where a drag gesture currently is."""

    IDLE = "idle"
    DRAGGING = "dragging"
    HOVERING = "hovering"


def reorder_ids(ids: Sequence[str], source_id: str, target_id: str) -> list[str] | None:
    """
    Move source_id so it sits immediately before target_id.

    The target's position is taken after source_id has been removed, so
    [A, B, C] with A dropped on C gives [B, A, C]. Returns None when the
    move is a no-op (same id, or either id not in the sequence).
    """
    if source_id == target_id or source_id not in ids or target_id not in ids:
        return None

    remaining = [i for i in ids if i != source_id]
    remaining.insert(remaining.index(target_id), source_id)
    return remaining


class DragReorderEngine:
    """
    State machine for one drag gesture over the displayed item list.

    IDLE -> DRAGGING (drag_start) -> HOVERING (drag_enter) -> IDLE (drop or
    drag_end). Order values are assigned from the sequence the user actually
    sees, so hidden (filtered-out) items keep their previous values.
    """

    def __init__(self, store: EntityStore) -> None:
        self.store = store
        self.phase = DragPhase.IDLE
        self.source_id: str | None = None
        self.target_id: str | None = None

    def drag_start(self, item_id: str) -> None:
        self.phase = DragPhase.DRAGGING
        self.source_id = item_id
        self.target_id = None

    def drag_enter(self, target_id: str) -> None:
        """Hover over a potential drop target."""
        if self.source_id is None or target_id == self.source_id:
            return
        self.phase = DragPhase.HOVERING
        self.target_id = target_id

    def drag_leave(self) -> None:
        """Leave the hovered target; the drag itself continues."""
        if self.phase is DragPhase.HOVERING:
            self.phase = DragPhase.DRAGGING
            self.target_id = None

    def drag_end(self) -> None:
        self.phase = DragPhase.IDLE
        self.source_id = None
        self.target_id = None

    def drop(self, target_id: str, displayed_ids: Sequence[str]) -> list[str] | None:
        """
        Drop the dragged item before target_id.

        Every id in the resulting sequence gets ``order = index``; only items
        whose order actually changed are written. Always returns to IDLE.

        Returns:
            The new displayed sequence, or None if nothing moved.
        """
        source_id = self.source_id
        try:
            if self.phase is DragPhase.IDLE or source_id is None:
                return None

            new_ids = reorder_ids(displayed_ids, source_id, target_id)
            if new_ids is None:
                logger.debug("drop: no-op (%s onto %s)", source_id, target_id)
                return None

            self.apply_order(new_ids)
            logger.info("Reordered %s before %s", source_id, target_id)
            return new_ids
        finally:
            self.drag_end()

    def move(self, item_id: str, target_id: str, displayed_ids: Sequence[str]) -> list[str] | None:
        """A whole gesture in one call (keyboard reordering)."""
        self.drag_start(item_id)
        self.drag_enter(target_id)
        return self.drop(target_id, displayed_ids)

    def apply_order(self, ids: Sequence[str]) -> int:
        """Assign order = index to each top-level id; returns how many changed."""
        changed = 0
        for index, item_id in enumerate(ids):
            item = self.store.get_work_item(item_id)
            if item is None or not item.is_top_level or item.order == index:
                continue
            self.store.update_work_item(item_id, order=index)
            changed += 1
        return changed
