"""teamboard TUI Application."""

import logging

from textual.app import App
from textual.binding import Binding
from textual.screen import ModalScreen
from textual.widgets import Input

from .config import Settings
from .exceptions import ValidationError
from .models import BLOCKER_TAG
from .repositories import LocalStateFile, RecordStoreError, RestRecordStore
from .services import (
    AuthService,
    DashboardService,
    DragReorderEngine,
    EntityStore,
    FilterService,
    SprintNavigator,
    TreeProjector,
    WorkItemFilter,
)
from .sync import RemoteMirror
from .ui.screens import DashboardScreen, PasswordScreen, WorkItemsScreen
from .ui.widgets import (
    CommandBar,
    ConfirmModal,
    ItemDetailModal,
    ItemEdit,
    NewItemModal,
    NewItemRequest,
    PeopleModal,
    PersonEdit,
    TextPromptModal,
)

logger = logging.getLogger(__name__)


class TeamBoardApp(App):
    """teamboard - password-gated team task board."""

    TITLE = "teamboard"

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("r", "refresh", "Refresh", show=False),
        Binding("D", "dashboard", "Dashboard", show=True),
        # Work item actions
        Binding("n", "new_item", "New", show=True),
        Binding("a", "add_child", "Add child", show=True),
        Binding("B", "add_blocker", "Add blocker", show=False),
        Binding("c", "copy_item", "Copy", show=False),
        Binding("d", "delete_item", "Delete", show=True),
        Binding("space", "cycle_state", "State", show=False),
        Binding("e", "edit_item", "Edit", show=True),
        Binding("K", "move_item_up", "Move ↑", show=False),
        Binding("J", "move_item_down", "Move ↓", show=False),
        Binding("shift+up", "move_item_up", "Move ↑", show=False),
        Binding("shift+down", "move_item_down", "Move ↓", show=False),
        # Sprints
        Binding("[", "previous_sprint", "◀ Sprint", show=True),
        Binding("]", "next_sprint", "Sprint ▶", show=True),
        Binding("s", "toggle_sprint_scope", "Sprint/All", show=False),
        Binding("N", "new_sprint", "New sprint", show=False),
        Binding("R", "rename_sprint", "Rename sprint", show=False),
        Binding("X", "delete_sprint", "Delete sprint", show=False),
        # People
        Binding("P", "people", "People", show=True),
        # Filters
        Binding("/", "enter_filter", "Filter", show=True),
        Binding("b", "toggle_blockers", "Blockers", show=True),
        Binding("escape", "escape", "Back", show=False, priority=True),
        Binding("ctrl+l", "lock", "Lock", show=False),
    ]

    def __init__(self, settings: Settings | None = None) -> None:
        super().__init__()
        self.settings = settings or Settings()
        self._init_services()

    def _init_services(self) -> None:
        """Build the store and the services around it."""
        self.record_store = RestRecordStore.from_settings(self.settings)
        self.mirror = RemoteMirror(
            self.record_store,
            max_retries=self.settings.sync_retries,
            retry_delay=self.settings.sync_retry_delay,
        )
        state_file = LocalStateFile(self.settings.state_file) if self.settings.state_file else None

        self.store = EntityStore(self.mirror, state_file)
        self.auth_service = AuthService(self.settings.password)
        self.filter_service = FilterService()
        self.tree_projector = TreeProjector(self.store)
        self.reorder = DragReorderEngine(self.store)
        self.sprints = SprintNavigator(self.store)
        self.dashboard_service = DashboardService(self.store)

    def on_mount(self) -> None:
        """Load data, then ask for the password."""
        self.load_data()
        self.push_screen(PasswordScreen())

    def on_unmount(self) -> None:
        self.store.close()

    def load_data(self) -> None:
        """Load from the remote store, falling back to local state."""
        if self.record_store is not None:
            try:
                self.store.load_remote(self.record_store)
                return
            except RecordStoreError as e:
                logger.error("Remote load failed, using local state: %s", e)
                self.notify(f"Remote store unavailable: {e}", severity="warning", timeout=5)
        self.store.load_local()

    def unlock(self) -> None:
        """Called by the password screen on success."""
        self.switch_screen(WorkItemsScreen())

    def action_lock(self) -> None:
        self.auth_service.logout()
        self.switch_screen(PasswordScreen())

    def action_refresh(self) -> None:
        """Reload from the remote store."""
        screen = self.screen
        if not isinstance(screen, WorkItemsScreen):
            return
        if self.record_store is None:
            self.notify("No remote store configured", severity="warning")
            return
        self.mirror.flush()
        try:
            self.store.load_remote(self.record_store, seed_if_empty=False)
        except RecordStoreError as e:
            self.notify(f"Refresh failed: {e}", severity="error")
            return
        screen.refresh_items()

    def action_dashboard(self) -> None:
        if not isinstance(self.screen, WorkItemsScreen):
            return
        summary = self.dashboard_service.summary()
        names = {b.id: self.dashboard_service.assignee_name(b) for b in summary.blockers}
        self.push_screen(DashboardScreen(summary, names))

    # Work item actions
    def action_new_item(self) -> None:
        screen = self.screen
        if not isinstance(screen, WorkItemsScreen):
            return
        self.push_screen(
            NewItemModal("New work item"),
            callback=lambda request: self._create_item(request, parent_id=None),
        )

    def action_add_child(self) -> None:
        self._open_child_dialog(blocker=False)

    def action_add_blocker(self) -> None:
        self._open_child_dialog(blocker=True)

    def _open_child_dialog(self, blocker: bool) -> None:
        screen = self.screen
        if not isinstance(screen, WorkItemsScreen):
            return
        parent = screen.get_current_item()
        if parent is None:
            return
        heading = f"Add {'blocker' if blocker else 'child task'} to '{parent.title}'"
        self.push_screen(
            NewItemModal(heading),
            callback=lambda request: self._create_item(request, parent.id, blocker),
        )

    def _create_item(
        self, request: NewItemRequest | None, parent_id: str | None, blocker: bool = False
    ) -> None:
        """Create an item from a dialog result; blank titles are rejected."""
        screen = self.screen
        if request is None or not isinstance(screen, WorkItemsScreen):
            return

        parent = self.store.get_work_item(parent_id) if parent_id else None
        active = self.store.active_sprint
        try:
            item = self.store.add_work_item(
                request.title,
                type=request.type,
                tags=[BLOCKER_TAG] if blocker else [],
                parent_id=parent_id,
                sprint_id=parent.sprint_id if parent else (active.id if screen.sprint_only and active else None),
            )
        except ValidationError as e:
            self.notify(str(e), severity="error")
            return

        if item is None:
            self.notify("Parent item no longer exists", severity="warning")
            screen.refresh_items()
            return

        screen.refresh_items(focus_id=item.id)
        self.notify("Blocker added" if blocker else "Item created", timeout=2)

    def action_copy_item(self) -> None:
        screen = self.screen
        if not isinstance(screen, WorkItemsScreen):
            return
        item = screen.get_current_item()
        if item is None:
            return
        copy = self.store.copy_work_item(item.id)
        if copy is not None:
            screen.refresh_items(focus_id=copy.id)
            self.notify("Item copied", timeout=2)

    def action_delete_item(self) -> None:
        """Delete the current item and its children (with confirmation)."""
        screen = self.screen
        if not isinstance(screen, WorkItemsScreen):
            return
        item = screen.get_current_item()
        if item is None:
            return

        nested = len(self.tree_projector.descendant_ids(item.id))
        detail = f"{nested} nested item(s) will also be deleted." if nested else ""
        self.push_screen(
            ConfirmModal(f"Delete '{item.title}'?", detail),
            callback=lambda confirmed: self._handle_delete_confirm(confirmed, item.id),
        )

    def _handle_delete_confirm(self, confirmed: bool | None, item_id: str) -> None:
        if not confirmed:
            return
        screen = self.screen
        if not isinstance(screen, WorkItemsScreen):
            return
        removed = self.store.delete_work_item(item_id)
        screen.refresh_items()
        if removed:
            self.notify(f"Deleted {len(removed)} item(s)", timeout=2)

    def action_cycle_state(self) -> None:
        """Cycle the current item New -> Active -> Done -> New."""
        screen = self.screen
        if not isinstance(screen, WorkItemsScreen):
            return
        item = screen.get_current_item()
        if item is None:
            return
        updated = self.store.update_work_item(item.id, state=item.state.next())
        if updated is not None:
            screen.refresh_items(focus_id=item.id)
            self.notify(f"State: {updated.state.value}", timeout=2)

    def action_edit_item(self) -> None:
        """Open the detail dialog for the current item."""
        screen = self.screen
        if not isinstance(screen, WorkItemsScreen):
            return
        item = screen.get_current_item()
        if item is None:
            return
        self.push_screen(
            ItemDetailModal(item, self.store.people, self.sprints.ordered()),
            callback=lambda edit: self._apply_item_edit(edit, item.id),
        )

    def _apply_item_edit(self, edit: ItemEdit | None, item_id: str) -> None:
        screen = self.screen
        if edit is None or edit.is_empty or not isinstance(screen, WorkItemsScreen):
            return

        try:
            if edit.changes and self.store.update_work_item(item_id, **edit.changes) is None:
                self.notify("Item no longer exists", severity="warning")
                screen.refresh_items()
                return
            if edit.comment:
                self.store.add_comment(item_id, edit.comment)
        except ValidationError as e:
            self.notify(str(e), severity="error")
            return

        screen.refresh_items(focus_id=item_id)
        self.notify("Comment added" if not edit.changes else "Item updated", timeout=2)

    def action_move_item_up(self) -> None:
        self._move_item(-1)

    def action_move_item_down(self) -> None:
        self._move_item(1)

    def _move_item(self, delta: int) -> None:
        """Keyboard equivalent of dragging a row one slot up or down."""
        screen = self.screen
        if not isinstance(screen, WorkItemsScreen):
            return
        item = screen.get_current_item()
        if item is None:
            return
        if not item.is_top_level:
            self.notify("Only top-level items can be reordered", severity="warning")
            return

        ids = screen.displayed_ids()
        if item.id not in ids:
            return
        idx = ids.index(item.id)
        neighbour = idx + delta
        if neighbour < 0 or neighbour >= len(ids):
            return

        if delta < 0:
            # Drop the item on the row above it
            self.reorder.move(item.id, ids[neighbour], ids)
        else:
            # Drop the row below onto this item
            self.reorder.move(ids[neighbour], item.id, ids)
        screen.refresh_items(focus_id=item.id)

    # Sprint actions
    def action_next_sprint(self) -> None:
        self._navigate_sprint(self.sprints.navigate_next)

    def action_previous_sprint(self) -> None:
        self._navigate_sprint(self.sprints.navigate_previous)

    def _navigate_sprint(self, navigate) -> None:
        screen = self.screen
        if not isinstance(screen, WorkItemsScreen):
            return
        sprint = navigate()
        if sprint is None:
            self.notify("No more sprints that way", timeout=2)
            return
        screen.refresh_items()

    def action_toggle_sprint_scope(self) -> None:
        screen = self.screen
        if isinstance(screen, WorkItemsScreen):
            sprint_only = screen.toggle_sprint_scope()
            self.notify("Showing active sprint" if sprint_only else "Showing all items", timeout=2)

    def action_new_sprint(self) -> None:
        if not isinstance(self.screen, WorkItemsScreen):
            return
        self.push_screen(
            TextPromptModal("New sprint", placeholder="Sprint name"),
            callback=self._create_sprint,
        )

    def _create_sprint(self, name: str | None) -> None:
        """Add a sprint after the latest one; it becomes active if none is."""
        screen = self.screen
        if name is None or not isinstance(screen, WorkItemsScreen):
            return
        try:
            sprint = self.store.add_sprint(name)
        except ValidationError as e:
            self.notify(str(e), severity="error")
            return
        if self.store.active_sprint is None:
            self.sprints.activate(sprint.id)
        screen.refresh_items()
        self.notify(f"Sprint created: {sprint.name}", timeout=2)

    def action_rename_sprint(self) -> None:
        if not isinstance(self.screen, WorkItemsScreen):
            return
        sprint = self.store.active_sprint
        if sprint is None:
            self.notify("No sprint selected", severity="warning")
            return
        self.push_screen(
            TextPromptModal("Rename sprint", value=sprint.name),
            callback=lambda name: self._rename_sprint(name, sprint.id),
        )

    def _rename_sprint(self, name: str | None, sprint_id: str) -> None:
        screen = self.screen
        if name is None or not isinstance(screen, WorkItemsScreen):
            return
        try:
            updated = self.store.update_sprint(sprint_id, name=name)
        except ValidationError as e:
            self.notify(str(e), severity="error")
            return
        if updated is not None:
            screen.refresh_items()
            self.notify(f"Sprint renamed: {updated.name}", timeout=2)

    def action_delete_sprint(self) -> None:
        """Delete the active sprint (with confirmation); its items move to no sprint."""
        if not isinstance(self.screen, WorkItemsScreen):
            return
        sprint = self.store.active_sprint
        if sprint is None:
            self.notify("No sprint selected", severity="warning")
            return
        planned = len(self.store.items_in_sprint(sprint.id))
        detail = f"{planned} item(s) will move to no sprint." if planned else ""
        self.push_screen(
            ConfirmModal(f"Delete sprint '{sprint.name}'?", detail),
            callback=lambda confirmed: self._handle_delete_sprint_confirm(confirmed, sprint.id),
        )

    def _handle_delete_sprint_confirm(self, confirmed: bool | None, sprint_id: str) -> None:
        if not confirmed:
            return
        screen = self.screen
        if not isinstance(screen, WorkItemsScreen):
            return
        # Pick the neighbour before the sprint disappears
        fallback = self.sprints.previous() or self.sprints.next()
        if self.store.delete_sprint(sprint_id) is None:
            return
        if fallback is not None:
            self.sprints.activate(fallback.id)
        screen.refresh_items()
        self.notify("Sprint deleted", timeout=2)

    # People
    def action_people(self) -> None:
        if not isinstance(self.screen, WorkItemsScreen):
            return
        self.push_screen(PeopleModal(self.store.people), callback=self._apply_person_edit)

    def _apply_person_edit(self, edit: PersonEdit | None) -> None:
        """Apply one people-manager change, then reopen the manager."""
        screen = self.screen
        if edit is None or not isinstance(screen, WorkItemsScreen):
            return

        if edit.delete:
            assigned = sum(1 for i in self.store.work_items if i.assignee_id == edit.person_id)
            detail = f"{assigned} item(s) will be unassigned." if assigned else ""
            self.push_screen(
                ConfirmModal(f"Remove '{edit.name}'?", detail, confirm_label="Remove"),
                callback=lambda confirmed: self._handle_delete_person_confirm(confirmed, edit),
            )
            return

        try:
            if edit.person_id is None:
                person = self.store.add_person(edit.name)
                message = f"Added {person.name}"
            else:
                person = self.store.update_person(edit.person_id, name=edit.name)
                message = f"Renamed to {person.name}" if person else "Person no longer exists"
        except ValidationError as e:
            self.notify(str(e), severity="error")
            return

        screen.refresh_items()
        self.notify(message, timeout=2)
        self.action_people()

    def _handle_delete_person_confirm(self, confirmed: bool | None, edit: PersonEdit) -> None:
        screen = self.screen
        if not isinstance(screen, WorkItemsScreen):
            return
        if confirmed and edit.person_id and self.store.delete_person(edit.person_id):
            screen.refresh_items()
            self.notify(f"Removed {edit.name}", timeout=2)
        self.action_people()

    # Filter actions
    def action_enter_filter(self) -> None:
        screen = self.screen
        if not isinstance(screen, WorkItemsScreen):
            return
        screen.query_one(CommandBar).open()

    def action_toggle_blockers(self) -> None:
        screen = self.screen
        if not isinstance(screen, WorkItemsScreen):
            return
        current = screen.active_filter
        screen.set_filter(
            current.with_changes(blocker_only=not current.blocker_only),
            screen.query_one(CommandBar).expression,
        )

    def action_escape(self) -> None:
        """Dismiss modal, close the filter bar, or clear the filter."""
        screen = self.screen

        if isinstance(screen, ModalScreen):
            screen.dismiss(None)
            return

        if not isinstance(screen, WorkItemsScreen):
            return

        command_bar = screen.query_one(CommandBar)
        if command_bar.is_open:
            command_bar.close()
        elif screen.active_filter.is_active:
            command_bar.remember("")
            screen.set_filter(WorkItemFilter())

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Apply the filter bar expression."""
        if event.input.id != "filter-input":
            return
        screen = self.screen
        if isinstance(screen, WorkItemsScreen):
            command_bar = screen.query_one(CommandBar)
            command_bar.remember(event.value)
            command_bar.close()
            screen.set_filter(self.filter_service.parse(event.value, self.store.people), event.value)


def run(settings: Settings | None = None) -> None:
    """Run the teamboard application."""
    app = TeamBoardApp(settings)
    app.run()
