"""Snapshot of every entity collection."""

from pydantic import BaseModel, Field

from .announcement import Announcement
from .board import Board, BoardNote
from .person import Person
from .sprint import Sprint
from .work_item import WorkItem


class BoardState(BaseModel):
    """All collections, as persisted to the local state file.

    Never carries the authentication flag; unlocking is per session.
    """

    version: int = 1
    work_items: list[WorkItem] = Field(default_factory=list)
    people: list[Person] = Field(default_factory=list)
    sprints: list[Sprint] = Field(default_factory=list)
    boards: list[Board] = Field(default_factory=list)
    notes: list[BoardNote] = Field(default_factory=list)
    announcements: list[Announcement] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.work_items or self.people or self.sprints)
