"""Main work item list screen."""

from __future__ import annotations

from rich.markup import escape
from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Static

from ...models import WorkItem
from ...services import WorkItemFilter
from ...utils import format_date
from ..widgets.command_bar import CommandBar
from ..widgets.work_item_table import WorkItemTable


class WorkItemsScreen(Screen):
    """Hierarchical work item table with sprint header and filter bar."""

    DEFAULT_CSS = """
    WorkItemsScreen #sprint-bar {
        height: 1;
        padding: 0 1;
        background: $boost;
    }

    WorkItemsScreen #filter-status {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }

    WorkItemsScreen WorkItemTable {
        height: 1fr;
    }

    WorkItemsScreen #empty-message {
        display: none;
        padding: 1 2;
        color: $text-muted;
    }

    WorkItemsScreen.-empty #empty-message {
        display: block;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._item_filter = WorkItemFilter()
        self._collapsed: set[str] = set()
        self._sprint_only = False
        self._displayed_ids: list[str] = []

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="sprint-bar")
        yield WorkItemTable(id="items")
        yield Static("No items found", id="empty-message")
        yield Static("", id="filter-status")
        yield CommandBar()
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_items()
        self.query_one(WorkItemTable).focus()

    # --- State ---

    @property
    def active_filter(self) -> WorkItemFilter:
        return self._item_filter

    @property
    def sprint_only(self) -> bool:
        return self._sprint_only

    def set_filter(self, filter_: WorkItemFilter, expression: str = "") -> None:
        self._item_filter = filter_
        self._update_filter_status(expression)
        self.refresh_items()

    def toggle_sprint_scope(self) -> bool:
        """Switch between all items and items in the active sprint."""
        self._sprint_only = not self._sprint_only
        self.refresh_items()
        return self._sprint_only

    def toggle_collapsed(self, item_id: str) -> None:
        if item_id in self._collapsed:
            self._collapsed.discard(item_id)
        else:
            self._collapsed.add(item_id)
        self.refresh_items(focus_id=item_id)

    def displayed_ids(self) -> list[str]:
        """Top-level ids as currently shown (filtered and sorted)."""
        return list(self._displayed_ids)

    def get_current_item(self) -> WorkItem | None:
        item_id = self.query_one(WorkItemTable).current_id
        if item_id is None:
            return None
        return self.app.store.get_work_item(item_id)  # pyrefly: ignore[missing-attribute]

    # --- Rendering ---

    def refresh_items(self, focus_id: str | None = None) -> None:
        """Rebuild the table from the live store."""
        app = self.app
        store = app.store  # pyrefly: ignore[missing-attribute]
        table = self.query_one(WorkItemTable)

        if focus_id is None:
            focus_id = table.current_id

        items = store.work_items
        active = store.active_sprint
        if self._sprint_only:
            sprint_id = active.id if active else None
            items = [i for i in items if i.sprint_id == sprint_id or not i.is_top_level]

        visible = app.filter_service.visible(items, self._item_filter)  # pyrefly: ignore[missing-attribute]
        self._displayed_ids = [i.id for i in visible]

        rows = app.tree_projector.rows(visible, collapsed=self._collapsed)  # pyrefly: ignore[missing-attribute]
        parents = {i.parent_id for i in store.work_items if i.parent_id is not None}
        table.set_rows(
            rows,
            people={p.id: p for p in store.people},
            sprints={s.id: s for s in store.sprints},
            parents=parents,
            collapsed=self._collapsed,
        )
        self.set_class(not rows, "-empty")
        if focus_id:
            table.focus_id(focus_id)

        self._update_sprint_bar()

    def _update_sprint_bar(self) -> None:
        navigator = self.app.sprints  # pyrefly: ignore[missing-attribute]
        current = navigator.current()
        scope = "sprint" if self._sprint_only else "all items"
        if current is None:
            text = f"[dim]No sprint selected[/]  ·  {scope}"
        else:
            prev_hint = "◀ " if navigator.previous() else "  "
            next_hint = " ▶" if navigator.next() else "  "
            text = (
                f"{prev_hint}[b]{escape(current.name)}[/]{next_hint}  "
                f"[dim]{format_date(current.start_date)} - {format_date(current.end_date)}[/]"
                f"  ·  {scope}"
            )
        self.query_one("#sprint-bar", Static).update(text)

    def _update_filter_status(self, expression: str) -> None:
        status = self.query_one("#filter-status", Static)
        if not self._item_filter.is_active:
            status.update("")
            return
        label = expression or ("blockers only" if self._item_filter.blocker_only else "custom")
        status.update(f"[dim]Filter: {escape(label)}  (esc to clear)[/]")

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Enter on a row expands or collapses its children."""
        if event.row_key.value is not None:
            self.toggle_collapsed(event.row_key.value)
