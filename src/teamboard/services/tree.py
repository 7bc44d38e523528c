"""Parent/child view derived from the flat work item list."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..models import WorkItem

if TYPE_CHECKING:
    from .entity_store import EntityStore


@dataclass(frozen=True)
class TreeRow:
    """One rendered row: an item and how deeply it is nested."""

    item: WorkItem
    depth: int


def descendant_ids(items: Iterable[WorkItem], root_id: str) -> list[str]:
    """
    Ids of every item beneath root_id, breadth first.

    Guards against parent_id cycles: each id is visited at most once.
    """
    children: dict[str, list[str]] = {}
    for item in items:
        if item.parent_id is not None:
            children.setdefault(item.parent_id, []).append(item.id)

    result: list[str] = []
    seen = {root_id}
    frontier = [root_id]
    while frontier:
        next_frontier: list[str] = []
        for parent in frontier:
            for child in children.get(parent, []):
                if child not in seen:
                    seen.add(child)
                    result.append(child)
                    next_frontier.append(child)
        frontier = next_frontier
    return result


class TreeProjector:
    """
    Answers parent/child questions against the store's live collection.

    Nothing is cached: every call re-scans the flat list so it always sees
    the latest optimistic state. Fine for tens to hundreds of items.
    """

    def __init__(self, store: EntityStore) -> None:
        self.store = store

    def children_of(self, parent_id: str) -> list[WorkItem]:
        """Direct children, in store insertion order."""
        return [i for i in self.store.work_items if i.parent_id == parent_id]

    def has_children(self, item_id: str) -> bool:
        return any(i.parent_id == item_id for i in self.store.work_items)

    def descendant_ids(self, item_id: str) -> list[str]:
        return descendant_ids(self.store.work_items, item_id)

    def rows(
        self,
        top_level: Sequence[WorkItem],
        max_depth: int | None = None,
        collapsed: Collection[str] = (),
    ) -> list[TreeRow]:
        """
        Flatten top-level items into display rows with children nested.

        Children are never filtered; they follow their parent unless the
        parent is collapsed or max_depth is reached.
        """
        by_parent: dict[str, list[WorkItem]] = {}
        for item in self.store.work_items:
            if item.parent_id is not None:
                by_parent.setdefault(item.parent_id, []).append(item)

        rows: list[TreeRow] = []
        seen: set[str] = set()

        def visit(item: WorkItem, depth: int) -> None:
            if item.id in seen:
                return
            seen.add(item.id)
            rows.append(TreeRow(item, depth))
            if item.id in collapsed:
                return
            if max_depth is not None and depth >= max_depth:
                return
            for child in by_parent.get(item.id, []):
                visit(child, depth + 1)

        for item in top_level:
            visit(item, 0)
        return rows
