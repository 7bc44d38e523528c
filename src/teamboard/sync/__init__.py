"""Remote mirroring: field mapping and the outbound write queue."""

from .mapper import (
    ANNOUNCEMENTS,
    BOARD_NOTES,
    BOARDS,
    COMMENTS,
    MAPPINGS,
    PEOPLE,
    SPRINTS,
    WORK_ITEMS,
    TableMapping,
    comment_from_record,
    comment_to_record,
)
from .mirror import OutboundTask, RemoteMirror

__all__ = [
    "ANNOUNCEMENTS",
    "BOARDS",
    "BOARD_NOTES",
    "COMMENTS",
    "MAPPINGS",
    "PEOPLE",
    "SPRINTS",
    "WORK_ITEMS",
    "OutboundTask",
    "RemoteMirror",
    "TableMapping",
    "comment_from_record",
    "comment_to_record",
]
