"""In-process entity store with optimistic remote mirroring."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel

from ..exceptions import ValidationError
from ..models import (
    DEFAULT_NOTE_COLOR,
    Announcement,
    Board,
    BoardNote,
    BoardState,
    Comment,
    Person,
    Priority,
    Sprint,
    WorkItem,
    WorkItemState,
    WorkItemType,
)
from ..sync import (
    ANNOUNCEMENTS,
    BOARD_NOTES,
    BOARDS,
    COMMENTS,
    PEOPLE,
    SPRINTS,
    WORK_ITEMS,
    RemoteMirror,
    TableMapping,
    comment_from_record,
    comment_to_record,
)
from ..utils import generate_id, now_ms
from .seed import default_people, default_sprints, default_work_items
from .sprint_navigator import default_start_date
from .tree import descendant_ids

if TYPE_CHECKING:
    from ..repositories import LocalStateFile, RecordStoreProtocol

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _require_text(value: str | None, field: str) -> str:
    """Strip and validate a required text field."""
    text = (value or "").strip()
    if not text:
        raise ValidationError(field)
    return text


def _merge(model: ModelT, changes: dict[str, Any]) -> ModelT:
    """Shallow-merge changes over a model, re-validating the result."""
    if "id" in changes and changes["id"] != getattr(model, "id"):
        raise ValueError("id cannot be changed")
    unknown = set(changes) - set(type(model).model_fields)
    if unknown:
        raise ValueError(f"Unknown fields for {type(model).__name__}: {sorted(unknown)}")
    return type(model).model_validate({**model.model_dump(), **changes})


def _log_bad_record(table: str, record: dict[str, Any], error: Exception) -> None:
    # pydantic.ValidationError is a ValueError
    logger.warning("Skipping unreadable %s record %s: %s", table, record.get("id"), error)


class EntityStore:
    """
    Authoritative in-memory copy of every entity collection.

    Mutations commit locally first, then hand the full post-update record to
    the RemoteMirror, and finally rewrite the local state file if one is
    configured. Remote failures never roll local state back.

    Operations on ids that no longer exist return None and change nothing.
    """

    def __init__(
        self,
        mirror: RemoteMirror | None = None,
        state_file: LocalStateFile | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.mirror = mirror or RemoteMirror(None)
        self.state_file = state_file
        self._clock = clock

        self._work_items: list[WorkItem] = []
        self._people: list[Person] = []
        self._sprints: list[Sprint] = []
        self._boards: list[Board] = []
        self._notes: list[BoardNote] = []
        self._announcements: list[Announcement] = []

    # --- Lifecycle ---

    def load_state(self, state: BoardState) -> None:
        """Replace every collection with the given snapshot (no persistence)."""
        self._work_items = list(state.work_items)
        self._people = list(state.people)
        self._sprints = list(state.sprints)
        self._boards = list(state.boards)
        self._notes = list(state.notes)
        self._announcements = list(state.announcements)

    def load_local(self, seed_if_empty: bool = True) -> None:
        """Load from the local state file, seeding defaults if there is none."""
        state = self.state_file.load() if self.state_file else None
        if state is not None:
            self.load_state(state)
            logger.info(
                "Loaded local state: %d items, %d people, %d sprints",
                len(self._work_items),
                len(self._people),
                len(self._sprints),
            )
        if seed_if_empty and self.snapshot().is_empty:
            self.seed_defaults()

    def load_remote(self, store: RecordStoreProtocol, seed_if_empty: bool = True) -> None:
        """
        Load every table from the remote store.

        Raises RecordStoreError if the store cannot be read; the current
        collections are left untouched in that case. Records that cannot be
        decoded are logged and skipped.
        """

        def fetch(mapping: TableMapping[ModelT]) -> list[ModelT]:
            models: list[ModelT] = []
            for record in store.select(mapping.table, mapping.order_by):
                try:
                    models.append(mapping.from_record(record))
                except (KeyError, ValueError) as e:
                    _log_bad_record(mapping.table, record, e)
            return models

        people = fetch(PEOPLE)
        sprints = fetch(SPRINTS)
        work_items = fetch(WORK_ITEMS)
        boards = fetch(BOARDS)
        notes = fetch(BOARD_NOTES)
        announcements = fetch(ANNOUNCEMENTS)

        comments: dict[str, list[Comment]] = {}
        for record in store.select(COMMENTS.table, COMMENTS.order_by):
            try:
                work_item_id, comment = comment_from_record(record)
            except (KeyError, ValueError) as e:
                _log_bad_record(COMMENTS.table, record, e)
                continue
            comments.setdefault(work_item_id, []).append(comment)

        work_items = [
            item.model_copy(
                update={"comments": sorted(comments.get(item.id, []), key=lambda c: c.created_at)}
            )
            for item in work_items
        ]

        self.load_state(
            BoardState(
                work_items=work_items,
                people=people,
                sprints=sprints,
                boards=boards,
                notes=notes,
                announcements=announcements,
            )
        )
        logger.info(
            "Loaded remote state: %d items, %d people, %d sprints",
            len(work_items),
            len(people),
            len(sprints),
        )

        if seed_if_empty and self.snapshot().is_empty:
            self.seed_defaults()
        else:
            self._save_local()

    def seed_defaults(self) -> None:
        """Install the default people, sprint and work items."""
        now = self._clock()
        logger.info("Seeding default records")
        self._people = default_people()
        self._sprints = default_sprints(now)
        self._work_items = default_work_items(now)
        for person in self._people:
            self._upsert(PEOPLE, person)
        for sprint in self._sprints:
            self._upsert(SPRINTS, sprint)
        for item in self._work_items:
            self._upsert(WORK_ITEMS, item)
        self._save_local()

    def snapshot(self) -> BoardState:
        """Current state of every collection."""
        return BoardState(
            work_items=list(self._work_items),
            people=list(self._people),
            sprints=list(self._sprints),
            boards=list(self._boards),
            notes=list(self._notes),
            announcements=list(self._announcements),
        )

    def close(self) -> None:
        """Drain pending remote writes and release the mirror."""
        self.mirror.close()

    # --- Read access ---

    @property
    def work_items(self) -> list[WorkItem]:
        return list(self._work_items)

    @property
    def people(self) -> list[Person]:
        return list(self._people)

    @property
    def sprints(self) -> list[Sprint]:
        return list(self._sprints)

    @property
    def boards(self) -> list[Board]:
        return list(self._boards)

    @property
    def notes(self) -> list[BoardNote]:
        return list(self._notes)

    @property
    def announcements(self) -> list[Announcement]:
        """Announcements, newest first."""
        return sorted(self._announcements, key=lambda a: a.created_at, reverse=True)

    def get_work_item(self, item_id: str) -> WorkItem | None:
        return next((i for i in self._work_items if i.id == item_id), None)

    def get_person(self, person_id: str) -> Person | None:
        return next((p for p in self._people if p.id == person_id), None)

    def get_sprint(self, sprint_id: str) -> Sprint | None:
        return next((s for s in self._sprints if s.id == sprint_id), None)

    def get_board(self, board_id: str) -> Board | None:
        return next((b for b in self._boards if b.id == board_id), None)

    def get_note(self, note_id: str) -> BoardNote | None:
        return next((n for n in self._notes if n.id == note_id), None)

    def notes_for(self, board_id: str) -> list[BoardNote]:
        return [n for n in self._notes if n.board_id == board_id]

    # --- Work items ---

    def add_work_item(
        self,
        title: str,
        type: WorkItemType = WorkItemType.TASK,
        state: WorkItemState = WorkItemState.NEW,
        priority: Priority = Priority.MEDIUM,
        tags: Iterable[str] = (),
        parent_id: str | None = None,
        sprint_id: str | None = None,
        assignee_id: str | None = None,
        description: str | None = None,
    ) -> WorkItem | None:
        """Create a work item. Returns None if parent_id is unknown."""
        title = _require_text(title, "title")
        if parent_id is not None and self.get_work_item(parent_id) is None:
            logger.debug("add_work_item: parent not found: %s", parent_id)
            return None

        item = WorkItem(
            id=generate_id("wi"),
            title=title,
            type=type,
            state=state,
            priority=priority,
            tags=list(tags),
            parent_id=parent_id,
            sprint_id=sprint_id,
            assignee_id=assignee_id,
            description=description,
            created_at=self._clock(),
        )
        self._work_items = [*self._work_items, item]
        self._upsert(WORK_ITEMS, item)
        self._save_local()
        logger.info("Work item created: %s (type=%s, parent=%s)", item.id, item.type.value, parent_id)
        return item

    def update_work_item(self, item_id: str, **changes: Any) -> WorkItem | None:
        """
        Merge changes onto a work item and persist the merged record.

        Fields not named in ``changes`` keep their value; an explicit None
        clears an optional field. Nesting an item gives up its top-level
        order.
        """
        existing = self.get_work_item(item_id)
        if existing is None:
            logger.debug("update_work_item: not found: %s", item_id)
            return None

        if "title" in changes:
            changes["title"] = _require_text(changes["title"], "title")

        new_parent = changes.get("parent_id", existing.parent_id)
        if new_parent is not None and "parent_id" in changes:
            if new_parent == item_id or new_parent in descendant_ids(self._work_items, item_id):
                raise ValidationError("parent_id", "An item cannot be nested under itself")
            if self.get_work_item(new_parent) is None:
                logger.debug("update_work_item: parent not found: %s", new_parent)
                return None
        if new_parent is not None:
            changes["order"] = None

        updated = _merge(existing, changes)
        self._work_items = [updated if i.id == item_id else i for i in self._work_items]
        self._upsert(WORK_ITEMS, updated)
        self._save_local()
        logger.debug("Work item updated: %s %s", item_id, sorted(changes))
        return updated

    def delete_work_item(self, item_id: str) -> list[str]:
        """
        Delete a work item and everything nested beneath it.

        The removal set is computed from the pre-delete snapshot and applied
        in one assignment. Returns the removed ids (empty if not found).
        """
        if self.get_work_item(item_id) is None:
            logger.debug("delete_work_item: not found: %s", item_id)
            return []

        removed = [item_id, *descendant_ids(self._work_items, item_id)]
        doomed = {i.id: i for i in self._work_items if i.id in set(removed)}
        self._work_items = [i for i in self._work_items if i.id not in doomed]

        # Deepest first, so a store with foreign keys never sees an orphan
        for removed_id in reversed(removed):
            for comment in doomed[removed_id].comments:
                self.mirror.delete(COMMENTS.table, comment.id)
            self.mirror.delete(WORK_ITEMS.table, removed_id)
        self._save_local()

        logger.info("Work item deleted: %s (%d removed)", item_id, len(removed))
        return removed

    def copy_work_item(self, item_id: str) -> WorkItem | None:
        """Duplicate an item (not its children or comments) as a new item."""
        source = self.get_work_item(item_id)
        if source is None:
            return None

        copy = source.model_copy(
            update={
                "id": generate_id("wi"),
                "title": f"{source.title} (Copy)",
                "tags": list(source.tags),
                "comments": [],
                "order": None,
                "created_at": self._clock(),
            }
        )
        self._work_items = [*self._work_items, copy]
        self._upsert(WORK_ITEMS, copy)
        self._save_local()
        logger.info("Work item copied: %s -> %s", item_id, copy.id)
        return copy

    def add_comment(
        self, item_id: str, text: str, author_id: str | None = None
    ) -> Comment | None:
        """Append a comment to a work item."""
        text = _require_text(text, "comment")
        item = self.get_work_item(item_id)
        if item is None:
            return None

        comment = Comment(
            id=generate_id("comment"),
            text=text,
            author_id=author_id,
            created_at=self._clock(),
        )
        updated = item.model_copy(update={"comments": [*item.comments, comment]})
        self._work_items = [updated if i.id == item_id else i for i in self._work_items]
        self.mirror.upsert(COMMENTS.table, comment_to_record(comment, item_id))
        self._save_local()
        return comment

    # --- People ---

    def add_person(self, name: str, handle: str | None = None) -> Person:
        person = Person(
            id=generate_id("person"),
            name=_require_text(name, "name"),
            handle=(handle or "").strip().lstrip("@") or None,
        )
        self._people = [*self._people, person]
        self._upsert(PEOPLE, person)
        self._save_local()
        logger.info("Person added: %s", person.id)
        return person

    def update_person(self, person_id: str, **changes: Any) -> Person | None:
        existing = self.get_person(person_id)
        if existing is None:
            return None
        if "name" in changes:
            changes["name"] = _require_text(changes["name"], "name")

        updated = _merge(existing, changes)
        self._people = [updated if p.id == person_id else p for p in self._people]
        self._upsert(PEOPLE, updated)
        self._save_local()
        return updated

    def delete_person(self, person_id: str) -> Person | None:
        """Remove a person and unassign their work items (items are kept)."""
        person = self.get_person(person_id)
        if person is None:
            return None

        self._people = [p for p in self._people if p.id != person_id]
        unassigned = self._clear_reference("assignee_id", person_id)
        self.mirror.delete(PEOPLE.table, person_id)
        self._save_local()

        logger.info("Person deleted: %s (%d items unassigned)", person_id, unassigned)
        return person

    # --- Sprints ---

    @property
    def active_sprint(self) -> Sprint | None:
        return next((s for s in self._sprints if s.is_active), None)

    def add_sprint(self, name: str, start_date: int | None = None) -> Sprint:
        """Create a sprint; without a start date it follows the latest sprint."""
        name = _require_text(name, "name")
        if start_date is None:
            start_date = default_start_date(self._sprints, self._clock())

        sprint = Sprint(id=generate_id("sprint"), name=name, start_date=start_date)
        self._sprints = [*self._sprints, sprint]
        self._upsert(SPRINTS, sprint)
        self._save_local()
        logger.info("Sprint created: %s (%s)", sprint.id, name)
        return sprint

    def update_sprint(self, sprint_id: str, **changes: Any) -> Sprint | None:
        """
        Merge changes onto a sprint. end_date always follows start_date.

        The active flag is not editable here; use activate_sprint so that at
        most one sprint is ever active.
        """
        if "is_active" in changes:
            raise ValidationError("is_active", "Use activate_sprint to change the active sprint")
        existing = self.get_sprint(sprint_id)
        if existing is None:
            return None
        if "name" in changes:
            changes["name"] = _require_text(changes["name"], "name")

        updated = _merge(existing, changes)
        self._sprints = [updated if s.id == sprint_id else s for s in self._sprints]
        self._upsert(SPRINTS, updated)
        self._save_local()
        return updated

    def activate_sprint(self, sprint_id: str | None) -> Sprint | None:
        """
        Make exactly one sprint active (None deactivates all).

        Only sprints whose flag actually changes are persisted. Returns the
        newly active sprint, or None if sprint_id is unknown or None.
        """
        if sprint_id is not None and self.get_sprint(sprint_id) is None:
            logger.debug("activate_sprint: not found: %s", sprint_id)
            return None

        changed: list[Sprint] = []
        sprints: list[Sprint] = []
        for sprint in self._sprints:
            should_be_active = sprint.id == sprint_id
            if sprint.is_active != should_be_active:
                sprint = sprint.model_copy(update={"is_active": should_be_active})
                changed.append(sprint)
            sprints.append(sprint)
        self._sprints = sprints

        for sprint in changed:
            self._upsert(SPRINTS, sprint)
        if changed:
            self._save_local()

        logger.info("Active sprint: %s", sprint_id)
        return self.get_sprint(sprint_id) if sprint_id else None

    def delete_sprint(self, sprint_id: str) -> Sprint | None:
        """Remove a sprint; its work items move to no sprint."""
        sprint = self.get_sprint(sprint_id)
        if sprint is None:
            return None

        self._sprints = [s for s in self._sprints if s.id != sprint_id]
        moved = self._clear_reference("sprint_id", sprint_id)
        self.mirror.delete(SPRINTS.table, sprint_id)
        self._save_local()

        logger.info("Sprint deleted: %s (%d items moved to no sprint)", sprint_id, moved)
        return sprint

    def items_in_sprint(self, sprint_id: str | None) -> list[WorkItem]:
        """Work items planned into a sprint (None = backlog)."""
        return [i for i in self._work_items if i.sprint_id == sprint_id]

    # --- Boards and notes ---

    def add_board(self, name: str) -> Board:
        board = Board(
            id=generate_id("board"),
            name=_require_text(name, "name"),
            created_at=self._clock(),
        )
        self._boards = [*self._boards, board]
        self._upsert(BOARDS, board)
        self._save_local()
        return board

    def update_board(self, board_id: str, **changes: Any) -> Board | None:
        existing = self.get_board(board_id)
        if existing is None:
            return None
        if "name" in changes:
            changes["name"] = _require_text(changes["name"], "name")

        updated = _merge(existing, changes)
        self._boards = [updated if b.id == board_id else b for b in self._boards]
        self._upsert(BOARDS, updated)
        self._save_local()
        return updated

    def delete_board(self, board_id: str) -> Board | None:
        """Remove a board together with all of its notes."""
        board = self.get_board(board_id)
        if board is None:
            return None

        doomed = [n.id for n in self._notes if n.board_id == board_id]
        self._boards = [b for b in self._boards if b.id != board_id]
        self._notes = [n for n in self._notes if n.board_id != board_id]

        for note_id in doomed:
            self.mirror.delete(BOARD_NOTES.table, note_id)
        self.mirror.delete(BOARDS.table, board_id)
        self._save_local()

        logger.info("Board deleted: %s (%d notes)", board_id, len(doomed))
        return board

    def add_note(
        self,
        board_id: str,
        title: str,
        content: str = "",
        color: str = DEFAULT_NOTE_COLOR,
        x: float = 0,
        y: float = 0,
    ) -> BoardNote | None:
        """Pin a note to a board. Returns None if the board is unknown."""
        title = _require_text(title, "title")
        if self.get_board(board_id) is None:
            return None

        note = BoardNote(
            id=generate_id("note"),
            board_id=board_id,
            title=title,
            content=content,
            color=color,
            x=x,
            y=y,
            created_at=self._clock(),
        )
        self._notes = [*self._notes, note]
        self._upsert(BOARD_NOTES, note)
        self._save_local()
        return note

    def update_note(self, note_id: str, **changes: Any) -> BoardNote | None:
        existing = self.get_note(note_id)
        if existing is None:
            return None
        if "title" in changes:
            changes["title"] = _require_text(changes["title"], "title")
        if "board_id" in changes and self.get_board(changes["board_id"]) is None:
            return None

        updated = _merge(existing, changes)
        self._notes = [updated if n.id == note_id else n for n in self._notes]
        self._upsert(BOARD_NOTES, updated)
        self._save_local()
        return updated

    def move_note(self, note_id: str, x: float, y: float) -> BoardNote | None:
        return self.update_note(note_id, x=x, y=y)

    def delete_note(self, note_id: str) -> BoardNote | None:
        note = self.get_note(note_id)
        if note is None:
            return None

        self._notes = [n for n in self._notes if n.id != note_id]
        self.mirror.delete(BOARD_NOTES.table, note_id)
        self._save_local()
        return note

    # --- Announcements ---

    def add_announcement(self, title: str, description: str = "") -> Announcement:
        announcement = Announcement(
            id=generate_id("ann"),
            title=_require_text(title, "title"),
            description=description,
            created_at=self._clock(),
        )
        self._announcements = [*self._announcements, announcement]
        self._upsert(ANNOUNCEMENTS, announcement)
        self._save_local()
        return announcement

    def update_announcement(self, announcement_id: str, **changes: Any) -> Announcement | None:
        existing = next((a for a in self._announcements if a.id == announcement_id), None)
        if existing is None:
            return None
        if "title" in changes:
            changes["title"] = _require_text(changes["title"], "title")

        updated = _merge(existing, changes)
        self._announcements = [
            updated if a.id == announcement_id else a for a in self._announcements
        ]
        self._upsert(ANNOUNCEMENTS, updated)
        self._save_local()
        return updated

    def delete_announcement(self, announcement_id: str) -> Announcement | None:
        existing = next((a for a in self._announcements if a.id == announcement_id), None)
        if existing is None:
            return None

        self._announcements = [a for a in self._announcements if a.id != announcement_id]
        self.mirror.delete(ANNOUNCEMENTS.table, announcement_id)
        self._save_local()
        return existing

    # --- Internals ---

    def _clear_reference(self, field: str, target_id: str) -> int:
        """Null out a non-owning work item reference; returns items changed."""
        changed: list[WorkItem] = []
        items: list[WorkItem] = []
        for item in self._work_items:
            if getattr(item, field) == target_id:
                item = item.model_copy(update={field: None})
                changed.append(item)
            items.append(item)
        self._work_items = items

        for item in changed:
            self._upsert(WORK_ITEMS, item)
        return len(changed)

    def _upsert(self, mapping: TableMapping[ModelT], obj: ModelT) -> None:
        self.mirror.upsert(mapping.table, mapping.to_record(obj))

    def _save_local(self) -> None:
        if self.state_file is not None:
            self.state_file.save(self.snapshot())
