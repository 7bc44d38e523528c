"""Work item domain model."""

from pydantic import BaseModel, Field

from .enums import Priority, WorkItemState, WorkItemType

BLOCKER_TAG = "Blocker"


class Comment(BaseModel):
    """A comment on a work item. Owned by exactly one item."""

    id: str
    text: str
    created_at: int
    author_id: str | None = None


class WorkItem(BaseModel):
    """A unit of work. Items form a tree through parent_id."""

    id: str
    title: str
    type: WorkItemType = WorkItemType.TASK
    state: WorkItemState = WorkItemState.NEW
    priority: Priority = Priority.MEDIUM
    tags: list[str] = Field(default_factory=list)

    # Non-owning references
    parent_id: str | None = None
    sprint_id: str | None = None
    assignee_id: str | None = None

    description: str | None = None
    comments: list[Comment] = Field(default_factory=list)

    # Position among top-level items; falls back to created_at
    order: int | None = None
    created_at: int

    @property
    def is_top_level(self) -> bool:
        """True when the item has no parent."""
        return self.parent_id is None

    @property
    def is_blocker(self) -> bool:
        """True when tagged as a blocker."""
        return BLOCKER_TAG in self.tags

    @property
    def sort_key(self) -> int:
        """Position number: explicit order, else creation time."""
        return self.order if self.order is not None else self.created_at
