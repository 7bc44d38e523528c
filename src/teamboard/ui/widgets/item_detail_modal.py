"""Work item detail dialog: fields, description and comments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select, Static, TextArea

from ...models import Person, Priority, Sprint, WorkItem
from ...utils import format_date

NONE = "__none__"


@dataclass
class ItemEdit:
    """Field changes plus an optional new comment."""

    changes: dict[str, Any] = field(default_factory=dict)
    comment: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.changes and not self.comment


def parse_tags(text: str) -> list[str]:
    """Comma-separated tags, blanks and duplicates dropped."""
    tags: list[str] = []
    for raw in text.split(","):
        tag = raw.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def item_changes(
    item: WorkItem,
    *,
    title: str,
    priority: Priority,
    assignee_id: str | None,
    sprint_id: str | None,
    tags: list[str],
    description: str,
) -> dict[str, Any]:
    """Only the fields that differ from the item."""
    values: dict[str, Any] = {
        "title": title,
        "priority": priority,
        "assignee_id": assignee_id,
        "sprint_id": sprint_id,
        "tags": tags,
        "description": description.strip() or None,
    }
    return {name: value for name, value in values.items() if getattr(item, name) != value}


class ItemDetailModal(ModalScreen[ItemEdit | None]):
    """Edit title, priority, assignee, sprint, tags and description; add a comment."""

    DEFAULT_CSS = """
    ItemDetailModal {
        align: center middle;
    }

    ItemDetailModal > VerticalScroll {
        width: 80;
        height: 90%;
        padding: 1 2;
        background: $surface;
        border: solid $primary;
    }

    ItemDetailModal .heading {
        text-style: bold;
        margin-bottom: 1;
    }

    ItemDetailModal Input, ItemDetailModal Select {
        margin-bottom: 1;
    }

    ItemDetailModal TextArea {
        height: 6;
        margin-bottom: 1;
    }

    ItemDetailModal #comments {
        color: $text-muted;
        margin-bottom: 1;
    }

    ItemDetailModal .buttons {
        height: auto;
    }

    ItemDetailModal Button {
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("ctrl+s", "save", "Save"),
    ]

    def __init__(self, item: WorkItem, people: list[Person], sprints: list[Sprint]) -> None:
        super().__init__()
        self.item = item
        self._people = people
        self._sprints = sprints

    def compose(self) -> ComposeResult:
        item = self.item
        with VerticalScroll():
            yield Label(f"{item.type.value} · {item.state.value}", classes="heading")
            yield Input(value=item.title, placeholder="Title", id="detail-title")
            yield Select(
                [(p.value, p) for p in Priority],
                value=item.priority,
                allow_blank=False,
                id="detail-priority",
            )
            yield Select(
                [("Unassigned", NONE), *((p.display_name, p.id) for p in self._people)],
                value=self._option(item.assignee_id, {p.id for p in self._people}),
                allow_blank=False,
                id="detail-assignee",
            )
            yield Select(
                [("No sprint", NONE), *((s.name, s.id) for s in self._sprints)],
                value=self._option(item.sprint_id, {s.id for s in self._sprints}),
                allow_blank=False,
                id="detail-sprint",
            )
            yield Input(value=", ".join(item.tags), placeholder="Tags, comma separated", id="detail-tags")
            yield TextArea(item.description or "", id="detail-description")
            yield Static(self._render_comments(), id="comments")
            yield Input(placeholder="Add a comment (enter to save)", id="detail-comment")
            with Horizontal(classes="buttons"):
                yield Button("Save", id="save", variant="primary")
                yield Button("Cancel", id="cancel")

    def on_mount(self) -> None:
        self.query_one("#detail-title", Input).focus()

    @staticmethod
    def _option(value: str | None, known: set[str]) -> str:
        return value if value in known else NONE

    def _render_comments(self) -> str:
        if not self.item.comments:
            return "No comments yet"
        names = {p.id: p.name for p in self._people}
        lines = []
        for comment in self.item.comments:
            author = names.get(comment.author_id or "", "Anonymous")
            lines.append(
                f"[b]{escape(author)}[/] {format_date(comment.created_at)}: {escape(comment.text)}"
            )
        return "\n".join(lines)

    def collect(self) -> ItemEdit:
        """Read the form into an ItemEdit."""
        priority = self.query_one("#detail-priority", Select).value
        assignee = self.query_one("#detail-assignee", Select).value
        sprint = self.query_one("#detail-sprint", Select).value
        changes = item_changes(
            self.item,
            title=self.query_one("#detail-title", Input).value,
            priority=priority if isinstance(priority, Priority) else self.item.priority,
            assignee_id=assignee if isinstance(assignee, str) and assignee != NONE else None,
            sprint_id=sprint if isinstance(sprint, str) and sprint != NONE else None,
            tags=parse_tags(self.query_one("#detail-tags", Input).value),
            description=self.query_one("#detail-description", TextArea).text,
        )
        comment = self.query_one("#detail-comment", Input).value.strip()
        return ItemEdit(changes=changes, comment=comment or None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.action_save()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save":
            self.action_save()
        else:
            self.dismiss(None)

    def action_save(self) -> None:
        self.dismiss(self.collect())

    def action_cancel(self) -> None:
        self.dismiss(None)
