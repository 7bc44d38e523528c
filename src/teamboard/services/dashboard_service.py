"""Summary statistics for the dashboard."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..models import WorkItem, WorkItemState

if TYPE_CHECKING:
    from .entity_store import EntityStore

UNASSIGNED_LABEL = "Unassigned"
UNKNOWN_LABEL = "Unknown"


@dataclass
class DashboardSummary:
    """Numbers shown on the dashboard."""

    team_size: int = 0
    active_count: int = 0
    done_count: int = 0
    blockers: list[WorkItem] = field(default_factory=list)
    active_by_assignee: list[tuple[str, int]] = field(default_factory=list)
    active_by_type: list[tuple[str, int]] = field(default_factory=list)

    @property
    def blocker_count(self) -> int:
        return len(self.blockers)


class DashboardService:
    """Computes dashboard figures from the live store."""

    def __init__(self, store: EntityStore) -> None:
        self.store = store

    def assignee_name(self, item: WorkItem) -> str:
        if item.assignee_id is None:
            return UNASSIGNED_LABEL
        person = self.store.get_person(item.assignee_id)
        return person.name if person else UNKNOWN_LABEL

    def summary(self) -> DashboardSummary:
        items = self.store.work_items
        active = [i for i in items if i.state == WorkItemState.ACTIVE]

        by_assignee = Counter(self.assignee_name(i) for i in active)
        by_type = Counter(i.type.value for i in active)

        return DashboardSummary(
            team_size=len(self.store.people),
            active_count=len(active),
            done_count=sum(1 for i in items if i.state == WorkItemState.DONE),
            blockers=[i for i in items if i.is_blocker and i.state != WorkItemState.DONE],
            # most_common keeps first-seen order for ties
            active_by_assignee=by_assignee.most_common(),
            active_by_type=by_type.most_common(),
        )
