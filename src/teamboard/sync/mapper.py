"""Field mapping between in-memory models and remote store records.

Every persisted model field has an explicit column, and every column maps
back to exactly one field. Millisecond timestamps travel as ISO-8601 UTC
strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from ..models import Announcement, Board, BoardNote, Comment, Person, Sprint, WorkItem
from ..repositories.protocol import Record
from ..utils.datetime import from_iso, to_iso

ModelT = TypeVar("ModelT", bound=BaseModel)

COMMENT_OWNER_COLUMN = "work_item_id"


@dataclass(frozen=True)
class TableMapping(Generic[ModelT]):
    """How one model type is laid out in one remote table."""

    table: str
    model: type[ModelT]
    columns: dict[str, str]  # model field -> column
    timestamps: frozenset[str] = frozenset()
    nested: frozenset[str] = frozenset()  # fields stored in another table
    order_by: str | None = None
    extra_columns: frozenset[str] = field(default_factory=frozenset)

    @property
    def fields(self) -> dict[str, str]:
        """Reverse map: column -> model field."""
        return {column: name for name, column in self.columns.items()}

    def to_record(self, obj: ModelT, **extra: Any) -> Record:
        """Flatten a model into a store record."""
        data = obj.model_dump(mode="json", exclude=set(self.nested))
        record: Record = {}
        for name, column in self.columns.items():
            value = data.get(name)
            if name in self.timestamps and value is not None:
                value = to_iso(value)
            record[column] = value
        for column, value in extra.items():
            if column not in self.extra_columns:
                raise KeyError(f"{self.table} has no column {column!r}")
            record[column] = value
        return record

    def from_record(self, record: Record) -> ModelT:
        """Rebuild a model from a store record.

        Null columns fall back to the model default.
        """
        data: dict[str, Any] = {}
        for column, name in self.fields.items():
            value = record.get(column)
            if value is None:
                continue
            if name in self.timestamps and isinstance(value, str):
                value = from_iso(value)
            data[name] = value
        return self.model.model_validate(data)


PEOPLE = TableMapping(
    table="people",
    model=Person,
    columns={"id": "id", "name": "name", "handle": "handle"},
    order_by="name",
)

SPRINTS = TableMapping(
    table="sprints",
    model=Sprint,
    columns={
        "id": "id",
        "name": "name",
        "is_active": "is_active",
        "start_date": "start_date",
        "end_date": "end_date",
    },
    timestamps=frozenset({"start_date", "end_date"}),
    order_by="start_date",
)

WORK_ITEMS = TableMapping(
    table="work_items",
    model=WorkItem,
    columns={
        "id": "id",
        "title": "title",
        "type": "type",
        "state": "state",
        "priority": "priority",
        "tags": "tags",
        "parent_id": "parent_id",
        "sprint_id": "sprint_id",
        "assignee_id": "assignee_id",
        "description": "description",
        "order": "sort_order",
        "created_at": "created_at",
    },
    timestamps=frozenset({"created_at"}),
    nested=frozenset({"comments"}),
    order_by="created_at",
)

COMMENTS = TableMapping(
    table="comments",
    model=Comment,
    columns={
        "id": "id",
        "text": "text",
        "author_id": "author_id",
        "created_at": "created_at",
    },
    timestamps=frozenset({"created_at"}),
    order_by="created_at",
    extra_columns=frozenset({COMMENT_OWNER_COLUMN}),
)

BOARDS = TableMapping(
    table="boards",
    model=Board,
    columns={"id": "id", "name": "name", "created_at": "created_at"},
    timestamps=frozenset({"created_at"}),
    order_by="created_at",
)

BOARD_NOTES = TableMapping(
    table="board_notes",
    model=BoardNote,
    columns={
        "id": "id",
        "board_id": "board_id",
        "title": "title",
        "content": "content",
        "color": "color",
        "x": "position_x",
        "y": "position_y",
        "created_at": "created_at",
    },
    timestamps=frozenset({"created_at"}),
    order_by="created_at",
)

ANNOUNCEMENTS = TableMapping(
    table="announcements",
    model=Announcement,
    columns={
        "id": "id",
        "title": "title",
        "description": "description",
        "created_at": "created_at",
    },
    timestamps=frozenset({"created_at"}),
    order_by="created_at",
)

MAPPINGS: dict[str, TableMapping[Any]] = {
    m.table: m
    for m in (PEOPLE, SPRINTS, WORK_ITEMS, COMMENTS, BOARDS, BOARD_NOTES, ANNOUNCEMENTS)
}


def comment_to_record(comment: Comment, work_item_id: str) -> Record:
    """Flatten a comment, tagging it with its owning work item."""
    return COMMENTS.to_record(comment, **{COMMENT_OWNER_COLUMN: work_item_id})


def comment_from_record(record: Record) -> tuple[str, Comment]:
    """Return (work_item_id, comment) for a comment record."""
    return record[COMMENT_OWNER_COLUMN], COMMENTS.from_record(record)
