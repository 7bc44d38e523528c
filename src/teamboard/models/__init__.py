"""Data models."""

from .announcement import Announcement
from .board import DEFAULT_NOTE_COLOR, Board, BoardNote
from .enums import Priority, WorkItemState, WorkItemType
from .person import Person
from .sprint import SPRINT_LENGTH_DAYS, SPRINT_LENGTH_MS, Sprint
from .state import BoardState
from .work_item import BLOCKER_TAG, Comment, WorkItem

__all__ = [
    "BLOCKER_TAG",
    "DEFAULT_NOTE_COLOR",
    "SPRINT_LENGTH_DAYS",
    "SPRINT_LENGTH_MS",
    "Announcement",
    "Board",
    "BoardNote",
    "BoardState",
    "Comment",
    "Person",
    "Priority",
    "Sprint",
    "WorkItem",
    "WorkItemState",
    "WorkItemType",
]
