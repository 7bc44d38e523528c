"""Enums for work item type, state and priority."""

from enum import Enum


class WorkItemType(str, Enum):
    """Kinds of work item."""

    EPIC = "Epic"
    USER_STORY = "User Story"
    TASK = "Task"
    BUG = "Bug"
    OPERATION = "Operation"


class WorkItemState(str, Enum):
    """Workflow states, in board order."""

    NEW = "New"
    ACTIVE = "Active"
    DONE = "Done"

    def next(self) -> "WorkItemState":
        """Cycle New -> Active -> Done -> New."""
        members = list(WorkItemState)
        return members[(members.index(self) + 1) % len(members)]


class Priority(str, Enum):
    """Priority levels, most urgent first."""

    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
