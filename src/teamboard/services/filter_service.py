"""Service for parsing and applying work item filters."""

import re
from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum
from typing import TypeVar

from ..models import BLOCKER_TAG, Person, Priority, WorkItem, WorkItemState, WorkItemType

ALL = "all"
UNASSIGNED = "unassigned"

EnumT = TypeVar("EnumT", bound=Enum)


@dataclass(frozen=True)
class WorkItemFilter:
    """The filter bar state. "all" disables a field."""

    search: str = ""
    type: WorkItemType | str = ALL
    state: WorkItemState | str = ALL
    assignee: str = ALL  # person id, "all" or "unassigned"
    priority: Priority | str = ALL
    blocker_only: bool = False

    @property
    def is_active(self) -> bool:
        """True if any field narrows the list."""
        return self != WorkItemFilter()

    def reset(self) -> "WorkItemFilter":
        return WorkItemFilter()

    def with_changes(self, **changes: object) -> "WorkItemFilter":
        return replace(self, **changes)


def _enum_lookup(enum_cls: type[EnumT], raw: str) -> EnumT | None:
    """Match "user_story" / "User-Story" / "user story" to an enum member."""
    wanted = re.sub(r"[\s_\-]+", " ", raw).strip().lower()
    for member in enum_cls:
        if member.value.lower() == wanted:
            return member
    return None


def _person_lookup(people: list[Person], raw: str) -> str:
    """Resolve a name or @handle to a person id; anything else is taken as an id."""
    wanted = raw.lstrip("@").lower()
    for person in people:
        if person.id == raw:
            return person.id
    for person in people:
        if wanted in (person.name.lower(), (person.handle or "").lower()):
            return person.id
    return raw


class FilterService:
    """Service for narrowing and ordering the work item list."""

    # Pattern for key:value tokens
    TOKEN_PATTERN = re.compile(r"(?:(type|state|priority|assignee|blocker):)?(\S+)")

    def parse(self, expression: str, people: Iterable[Person] = ()) -> WorkItemFilter:
        """
        Parse a filter bar expression.

        Syntax:
        - Free text: matches the title
        - type:bug / type:user_story
        - state:new/active/done
        - priority:critical/high/medium/low
        - assignee:<name, @handle or person id> / assignee:unassigned
        - blocker:true - only items tagged Blocker

        Multiple conditions are ANDed together. Unknown values are ignored.
        """
        f = WorkItemFilter()
        text_parts: list[str] = []
        people = list(people)

        for match in self.TOKEN_PATTERN.finditer(expression):
            key = match.group(1)
            raw = match.group(2)

            if key is None:
                text_parts.append(raw)

            elif key == "type":
                item_type = _enum_lookup(WorkItemType, raw)
                if item_type is not None:
                    f = f.with_changes(type=item_type)

            elif key == "state":
                state = _enum_lookup(WorkItemState, raw)
                if state is not None:
                    f = f.with_changes(state=state)

            elif key == "priority":
                priority = _enum_lookup(Priority, raw)
                if priority is not None:
                    f = f.with_changes(priority=priority)

            elif key == "assignee":
                if raw.lower() == UNASSIGNED:
                    f = f.with_changes(assignee=UNASSIGNED)
                else:
                    f = f.with_changes(assignee=_person_lookup(people, raw))

            elif key == "blocker":
                f = f.with_changes(blocker_only=raw.lower() == "true")

        if text_parts:
            f = f.with_changes(search=" ".join(text_parts))

        return f

    def sort_top_level(self, items: Iterable[WorkItem]) -> list[WorkItem]:
        """Top-level items only, ordered by `order`, falling back to created_at."""
        return sorted((i for i in items if i.is_top_level), key=lambda i: i.sort_key)

    def apply(self, items: Iterable[WorkItem], filter_: WorkItemFilter) -> list[WorkItem]:
        """Apply filter to a list of items, keeping their order."""
        return [item for item in items if self._matches(item, filter_)]

    def visible(self, items: Iterable[WorkItem], filter_: WorkItemFilter) -> list[WorkItem]:
        """The displayed top-level sequence: sort first, then filter."""
        return self.apply(self.sort_top_level(items), filter_)

    def _matches(self, item: WorkItem, f: WorkItemFilter) -> bool:
        """Check if an item matches the filter."""
        # Text search (case-insensitive, title only)
        if f.search and f.search.lower() not in item.title.lower():
            return False

        if f.type != ALL and item.type != f.type:
            return False

        if f.state != ALL and item.state != f.state:
            return False

        if f.assignee != ALL:
            if f.assignee == UNASSIGNED:
                if item.assignee_id is not None:
                    return False
            elif item.assignee_id != f.assignee:
                return False

        if f.priority != ALL and item.priority != f.priority:
            return False

        if f.blocker_only and BLOCKER_TAG not in item.tags:
            return False

        return True
