"""Default records installed into an empty board."""

from ..models import (
    Person,
    Priority,
    Sprint,
    WorkItem,
    WorkItemState,
    WorkItemType,
)

DEFAULT_PEOPLE = (
    ("1", "Alex Chen", "alex"),
    ("2", "Jordan Lee", "jordan"),
    ("3", "Sam Rivera", "sam"),
    ("4", "Casey Kim", "casey"),
    ("5", "Morgan Wu", "morgan"),
    ("6", "Taylor Patel", "taylor"),
)


def default_people() -> list[Person]:
    return [Person(id=pid, name=name, handle=handle) for pid, name, handle in DEFAULT_PEOPLE]


def default_sprints(now: int) -> list[Sprint]:
    return [Sprint(id="sprint-1", name="Sprint 1", is_active=True, start_date=now)]


def default_work_items(now: int) -> list[WorkItem]:
    """A small starter tree: one story with two children, plus loose items."""
    return [
        WorkItem(
            id="wi-1",
            title="Set up project infrastructure",
            type=WorkItemType.USER_STORY,
            state=WorkItemState.ACTIVE,
            assignee_id="1",
            priority=Priority.HIGH,
            tags=["setup"],
            created_at=now,
        ),
        WorkItem(
            id="wi-2",
            title="Configure CI/CD pipeline",
            type=WorkItemType.TASK,
            assignee_id="2",
            priority=Priority.HIGH,
            tags=["devops"],
            parent_id="wi-1",
            created_at=now + 1,
        ),
        WorkItem(
            id="wi-3",
            title="Database migration blocked",
            type=WorkItemType.TASK,
            state=WorkItemState.ACTIVE,
            assignee_id="3",
            priority=Priority.CRITICAL,
            tags=["Blocker", "database"],
            parent_id="wi-1",
            created_at=now + 2,
        ),
        WorkItem(
            id="wi-4",
            title="Authentication flow broken",
            type=WorkItemType.BUG,
            state=WorkItemState.ACTIVE,
            assignee_id="4",
            priority=Priority.CRITICAL,
            tags=["Blocker", "auth"],
            sprint_id="sprint-1",
            created_at=now + 3,
        ),
        WorkItem(
            id="wi-5",
            title="User management epic",
            type=WorkItemType.EPIC,
            state=WorkItemState.ACTIVE,
            assignee_id="5",
            priority=Priority.HIGH,
            tags=["users"],
            sprint_id="sprint-1",
            created_at=now + 4,
        ),
        WorkItem(
            id="wi-6",
            title="Deploy monitoring stack",
            type=WorkItemType.OPERATION,
            assignee_id="6",
            tags=["monitoring"],
            created_at=now + 5,
        ),
    ]
