"""Chronological sprint navigation and activation."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from ..models import Sprint
from ..utils.datetime import DAY_MS

if TYPE_CHECKING:
    from .entity_store import EntityStore


def default_start_date(sprints: Iterable[Sprint], now: int) -> int:
    """Day after the latest sprint ends, or now when there are none."""
    end_dates = [s.end_date for s in sprints]
    if not end_dates:
        return now
    return max(end_dates) + DAY_MS


class SprintNavigator:
    """Orders sprints by start date and moves the active flag along them."""

    def __init__(self, store: EntityStore) -> None:
        self.store = store

    def ordered(self) -> list[Sprint]:
        """All sprints, earliest start first."""
        return sorted(self.store.sprints, key=lambda s: s.start_date)

    def current(self) -> Sprint | None:
        return self.store.active_sprint

    def next(self) -> Sprint | None:
        """Sprint after the active one, or None."""
        return self._adjacent(1)

    def previous(self) -> Sprint | None:
        """Sprint before the active one, or None."""
        return self._adjacent(-1)

    def activate(self, sprint_id: str | None) -> Sprint | None:
        """Make exactly one sprint active (None deactivates all)."""
        return self.store.activate_sprint(sprint_id)

    def navigate_next(self) -> Sprint | None:
        target = self.next()
        return self.activate(target.id) if target else None

    def navigate_previous(self) -> Sprint | None:
        target = self.previous()
        return self.activate(target.id) if target else None

    def _adjacent(self, delta: int) -> Sprint | None:
        current = self.current()
        if current is None:
            return None

        ordered = self.ordered()
        ids = [s.id for s in ordered]
        idx = ids.index(current.id) + delta
        if 0 <= idx < len(ordered):
            return ordered[idx]
        return None
