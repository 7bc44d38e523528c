"""Indented work item table."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from rich.text import Text
from textual.coordinate import Coordinate
from textual.widgets import DataTable

from ...models import Person, Priority, Sprint, WorkItemState
from ...services import TreeRow

STATE_STYLES: dict[WorkItemState, str] = {
    WorkItemState.NEW: "bold",
    WorkItemState.ACTIVE: "bold yellow",
    WorkItemState.DONE: "bold green",
}

PRIORITY_STYLES: dict[Priority, str] = {
    Priority.CRITICAL: "red",
    Priority.HIGH: "yellow",
    Priority.MEDIUM: "cyan",
    Priority.LOW: "dim",
}

COLUMNS = ("Title", "Type", "State", "Assignee", "Priority", "Sprint", "Tags")


class WorkItemTable(DataTable):
    """One row per work item; children are indented under their parent."""

    def __init__(self, **kwargs) -> None:
        super().__init__(cursor_type="row", zebra_stripes=True, **kwargs)
        self._row_ids: list[str] = []

    def on_mount(self) -> None:
        self.add_columns(*COLUMNS)

    def set_rows(
        self,
        rows: Sequence[TreeRow],
        people: Mapping[str, Person],
        sprints: Mapping[str, Sprint],
        parents: set[str],
        collapsed: set[str],
    ) -> None:
        """Replace table contents with the given rows."""
        self.clear()
        self._row_ids = []
        for row in rows:
            item = row.item
            marker = " "
            if item.id in parents:
                marker = "▸" if item.id in collapsed else "▾"
            title = Text("  " * row.depth + f"{marker} ")
            if item.is_blocker:
                title.append("⚠ ", style="bold red")
                title.append(item.title, style="red")
            else:
                title.append(item.title)

            assignee = people.get(item.assignee_id) if item.assignee_id else None
            sprint = sprints.get(item.sprint_id) if item.sprint_id else None

            self.add_row(
                title,
                item.type.value,
                Text(item.state.value, style=STATE_STYLES[item.state]),
                assignee.name if assignee else Text("Unassigned", style="dim"),
                Text(item.priority.value, style=PRIORITY_STYLES[item.priority]),
                sprint.name if sprint else Text("-", style="dim"),
                ", ".join(item.tags),
                key=item.id,
            )
            self._row_ids.append(item.id)

    @property
    def current_id(self) -> str | None:
        """Id of the row under the cursor."""
        if not self._row_ids or self.cursor_row < 0:
            return None
        row_key = self.coordinate_to_cell_key(Coordinate(self.cursor_row, 0)).row_key
        return row_key.value

    def focus_id(self, item_id: str) -> None:
        if item_id in self._row_ids:
            self.move_cursor(row=self._row_ids.index(item_id))
