"""Tests for app action handlers.

These verify the wiring between key bindings, the active screen and the
services, including the notifications shown to the user.
"""

from unittest.mock import MagicMock, PropertyMock, patch

import pytest

from teamboard.app import TeamBoardApp
from teamboard.exceptions import ValidationError
from teamboard.models import (
    BLOCKER_TAG,
    Person,
    Priority,
    Sprint,
    WorkItem,
    WorkItemState,
    WorkItemType,
)
from teamboard.repositories import RecordStoreError
from teamboard.services import WorkItemFilter
from teamboard.ui.screens import WorkItemsScreen
from teamboard.ui.widgets import (
    ConfirmModal,
    ItemDetailModal,
    ItemEdit,
    NewItemModal,
    NewItemRequest,
    PeopleModal,
    PersonEdit,
    TextPromptModal,
)


def make_item(item_id: str = "wi-1", **kwargs) -> WorkItem:
    kwargs.setdefault("title", "Item")
    kwargs.setdefault("created_at", 0)
    return WorkItem(id=item_id, **kwargs)


@pytest.fixture
def app() -> TeamBoardApp:
    """App with mocked services, bypassing Textual initialisation."""
    app = TeamBoardApp.__new__(TeamBoardApp)
    app.notify = MagicMock()
    app.push_screen = MagicMock()
    app.store = MagicMock()
    app.store.active_sprint = None
    app.mirror = MagicMock()
    app.record_store = None
    app.tree_projector = MagicMock()
    app.reorder = MagicMock()
    app.sprints = MagicMock()
    app.filter_service = MagicMock()
    app.dashboard_service = MagicMock()
    return app


@pytest.fixture
def screen() -> MagicMock:
    screen = MagicMock(spec=WorkItemsScreen)
    screen.sprint_only = False
    screen.active_filter = WorkItemFilter()
    return screen


@pytest.fixture
def on_screen(screen: MagicMock):
    """Patch App.screen to return the mocked work items screen."""
    with patch.object(TeamBoardApp, "screen", new_callable=PropertyMock, return_value=screen):
        yield screen


class TestNewItem:
    """Tests for item creation actions."""

    def test_new_item_opens_dialog(self, app: TeamBoardApp, on_screen):
        app.action_new_item()

        app.push_screen.assert_called_once()
        assert isinstance(app.push_screen.call_args[0][0], NewItemModal)

    def test_dialog_result_creates_item(self, app: TeamBoardApp, on_screen):
        app.store.add_work_item.return_value = make_item("wi-9")
        app.action_new_item()
        callback = app.push_screen.call_args.kwargs["callback"]

        callback(NewItemRequest(title="Fix login", type=WorkItemType.BUG))

        app.store.add_work_item.assert_called_once_with(
            "Fix login", type=WorkItemType.BUG, tags=[], parent_id=None, sprint_id=None
        )
        on_screen.refresh_items.assert_called_once_with(focus_id="wi-9")
        app.notify.assert_called_once_with("Item created", timeout=2)

    def test_cancelled_dialog_does_nothing(self, app: TeamBoardApp, on_screen):
        app.action_new_item()
        app.push_screen.call_args.kwargs["callback"](None)
        app.store.add_work_item.assert_not_called()

    def test_sprint_scope_assigns_active_sprint(self, app: TeamBoardApp, on_screen):
        on_screen.sprint_only = True
        app.store.active_sprint = Sprint(id="s1", name="S1", start_date=0, is_active=True)
        app.store.add_work_item.return_value = make_item()

        app._create_item(NewItemRequest(title="Planned", type=WorkItemType.TASK), parent_id=None)

        assert app.store.add_work_item.call_args.kwargs["sprint_id"] == "s1"

    def test_blank_title_shows_error(self, app: TeamBoardApp, on_screen):
        app.store.add_work_item.side_effect = ValidationError("title")

        app._create_item(NewItemRequest(title=" ", type=WorkItemType.TASK), parent_id=None)

        app.notify.assert_called_once_with("Title is required", severity="error")
        on_screen.refresh_items.assert_not_called()

    def test_add_blocker_tags_child(self, app: TeamBoardApp, on_screen):
        parent = make_item("wi-1", sprint_id="s2")
        on_screen.get_current_item.return_value = parent
        app.store.get_work_item.return_value = parent
        app.store.add_work_item.return_value = make_item("wi-2", parent_id="wi-1")

        app.action_add_blocker()
        app.push_screen.call_args.kwargs["callback"](
            NewItemRequest(title="Blocked by infra", type=WorkItemType.TASK)
        )

        app.store.add_work_item.assert_called_once_with(
            "Blocked by infra",
            type=WorkItemType.TASK,
            tags=[BLOCKER_TAG],
            parent_id="wi-1",
            sprint_id="s2",
        )
        app.notify.assert_called_once_with("Blocker added", timeout=2)

    def test_parent_gone(self, app: TeamBoardApp, on_screen):
        app.store.get_work_item.return_value = None
        app.store.add_work_item.return_value = None

        app._create_item(NewItemRequest(title="Child", type=WorkItemType.TASK), parent_id="gone")

        app.notify.assert_called_once()
        assert app.notify.call_args.kwargs["severity"] == "warning"

    def test_add_child_without_selection(self, app: TeamBoardApp, on_screen):
        on_screen.get_current_item.return_value = None
        app.action_add_child()
        app.push_screen.assert_not_called()


class TestDeleteAndCopy:
    """Tests for delete and copy actions."""

    def test_delete_asks_for_confirmation(self, app: TeamBoardApp, on_screen):
        on_screen.get_current_item.return_value = make_item()
        app.tree_projector.descendant_ids.return_value = ["wi-2", "wi-3"]

        app.action_delete_item()

        modal = app.push_screen.call_args[0][0]
        assert isinstance(modal, ConfirmModal)
        app.store.delete_work_item.assert_not_called()

    def test_confirmed_delete(self, app: TeamBoardApp, on_screen):
        on_screen.get_current_item.return_value = make_item()
        app.tree_projector.descendant_ids.return_value = []
        app.store.delete_work_item.return_value = ["wi-1"]

        app.action_delete_item()
        app.push_screen.call_args.kwargs["callback"](True)

        app.store.delete_work_item.assert_called_once_with("wi-1")
        app.notify.assert_called_once_with("Deleted 1 item(s)", timeout=2)

    def test_declined_delete(self, app: TeamBoardApp, on_screen):
        on_screen.get_current_item.return_value = make_item()
        app.tree_projector.descendant_ids.return_value = []

        app.action_delete_item()
        app.push_screen.call_args.kwargs["callback"](False)

        app.store.delete_work_item.assert_not_called()

    def test_copy(self, app: TeamBoardApp, on_screen):
        on_screen.get_current_item.return_value = make_item()
        app.store.copy_work_item.return_value = make_item("wi-copy")

        app.action_copy_item()

        on_screen.refresh_items.assert_called_once_with(focus_id="wi-copy")
        app.notify.assert_called_once_with("Item copied", timeout=2)


class TestCycleState:
    def test_cycles_to_next_state(self, app: TeamBoardApp, on_screen):
        on_screen.get_current_item.return_value = make_item(state=WorkItemState.ACTIVE)
        app.store.update_work_item.return_value = make_item(state=WorkItemState.DONE)

        app.action_cycle_state()

        app.store.update_work_item.assert_called_once_with("wi-1", state=WorkItemState.DONE)
        app.notify.assert_called_once_with("State: Done", timeout=2)


class TestMoveItem:
    """Tests for keyboard reordering."""

    def test_move_up_drops_on_previous(self, app: TeamBoardApp, on_screen):
        on_screen.get_current_item.return_value = make_item("B")
        on_screen.displayed_ids.return_value = ["A", "B", "C"]

        app.action_move_item_up()

        app.reorder.move.assert_called_once_with("B", "A", ["A", "B", "C"])
        on_screen.refresh_items.assert_called_once_with(focus_id="B")

    def test_move_down_drops_next_on_item(self, app: TeamBoardApp, on_screen):
        on_screen.get_current_item.return_value = make_item("B")
        on_screen.displayed_ids.return_value = ["A", "B", "C"]

        app.action_move_item_down()

        app.reorder.move.assert_called_once_with("C", "B", ["A", "B", "C"])

    def test_move_at_edge_is_noop(self, app: TeamBoardApp, on_screen):
        on_screen.get_current_item.return_value = make_item("A")
        on_screen.displayed_ids.return_value = ["A", "B"]

        app.action_move_item_up()

        app.reorder.move.assert_not_called()

    def test_child_cannot_move(self, app: TeamBoardApp, on_screen):
        on_screen.get_current_item.return_value = make_item("C1", parent_id="A")

        app.action_move_item_down()

        app.reorder.move.assert_not_called()
        assert app.notify.call_args.kwargs["severity"] == "warning"


class TestSprintActions:
    def test_next_sprint(self, app: TeamBoardApp, on_screen):
        app.sprints.navigate_next.return_value = Sprint(id="s2", name="S2", start_date=0)
        app.action_next_sprint()
        on_screen.refresh_items.assert_called_once()

    def test_no_previous_sprint(self, app: TeamBoardApp, on_screen):
        app.sprints.navigate_previous.return_value = None
        app.action_previous_sprint()
        app.notify.assert_called_once_with("No more sprints that way", timeout=2)
        on_screen.refresh_items.assert_not_called()

    def test_toggle_scope(self, app: TeamBoardApp, on_screen):
        on_screen.toggle_sprint_scope.return_value = True
        app.action_toggle_sprint_scope()
        app.notify.assert_called_once_with("Showing active sprint", timeout=2)


class TestFilterActions:
    def test_toggle_blockers(self, app: TeamBoardApp, on_screen):
        on_screen.query_one.return_value.expression = "type:bug"

        app.action_toggle_blockers()

        on_screen.set_filter.assert_called_once_with(
            WorkItemFilter(blocker_only=True), "type:bug"
        )

    def test_filter_submitted(self, app: TeamBoardApp, on_screen):
        parsed = WorkItemFilter(search="login")
        app.filter_service.parse.return_value = parsed
        event = MagicMock()
        event.input.id = "filter-input"
        event.value = "login"

        app.on_input_submitted(event)

        on_screen.set_filter.assert_called_once_with(parsed, "login")

    def test_other_input_ignored(self, app: TeamBoardApp, on_screen):
        event = MagicMock()
        event.input.id = "item-title"
        app.on_input_submitted(event)
        on_screen.set_filter.assert_not_called()

    def test_escape_clears_active_filter(self, app: TeamBoardApp, on_screen):
        on_screen.active_filter = WorkItemFilter(blocker_only=True)
        on_screen.query_one.return_value.is_open = False

        app.action_escape()

        on_screen.set_filter.assert_called_once_with(WorkItemFilter())


class TestLoadAndRefresh:
    """Tests for loading data from the stores."""

    def test_local_only(self, app: TeamBoardApp):
        app.load_data()
        app.store.load_local.assert_called_once_with()
        app.store.load_remote.assert_not_called()

    def test_remote_failure_falls_back(self, app: TeamBoardApp):
        app.record_store = MagicMock()
        app.store.load_remote.side_effect = RecordStoreError("offline")

        app.load_data()

        app.store.load_local.assert_called_once_with()
        assert app.notify.call_args.kwargs["severity"] == "warning"

    def test_refresh_without_remote(self, app: TeamBoardApp, on_screen):
        app.action_refresh()
        app.notify.assert_called_once_with("No remote store configured", severity="warning")

    def test_refresh_flushes_then_reloads(self, app: TeamBoardApp, on_screen):
        app.record_store = MagicMock()

        app.action_refresh()

        app.mirror.flush.assert_called_once()
        app.store.load_remote.assert_called_once_with(app.record_store, seed_if_empty=False)
        on_screen.refresh_items.assert_called_once()

    def test_refresh_failure(self, app: TeamBoardApp, on_screen):
        app.record_store = MagicMock()
        app.store.load_remote.side_effect = RecordStoreError("down")

        app.action_refresh()

        assert app.notify.call_args.kwargs["severity"] == "error"
        on_screen.refresh_items.assert_not_called()


class TestNotOnWorkItemsScreen:
    def test_actions_ignored(self, app: TeamBoardApp):
        other = MagicMock()
        with patch.object(TeamBoardApp, "screen", new_callable=PropertyMock, return_value=other):
            app.action_new_item()
            app.action_delete_item()
            app.action_cycle_state()

        app.push_screen.assert_not_called()
        app.store.update_work_item.assert_not_called()


class TestEditItem:
    """Tests for the item detail dialog."""

    def test_opens_dialog_for_current_item(self, app: TeamBoardApp, on_screen):
        on_screen.get_current_item.return_value = make_item()
        app.store.people = []
        app.sprints.ordered.return_value = []

        app.action_edit_item()

        modal = app.push_screen.call_args[0][0]
        assert isinstance(modal, ItemDetailModal)
        assert modal.item.id == "wi-1"

    def test_applies_changes(self, app: TeamBoardApp, on_screen):
        on_screen.get_current_item.return_value = make_item()
        app.store.update_work_item.return_value = make_item(assignee_id="p1")

        app.action_edit_item()
        app.push_screen.call_args.kwargs["callback"](
            ItemEdit(changes={"assignee_id": "p1", "priority": Priority.HIGH})
        )

        app.store.update_work_item.assert_called_once_with(
            "wi-1", assignee_id="p1", priority=Priority.HIGH
        )
        app.store.add_comment.assert_not_called()
        on_screen.refresh_items.assert_called_once_with(focus_id="wi-1")
        app.notify.assert_called_once_with("Item updated", timeout=2)

    def test_adds_comment(self, app: TeamBoardApp, on_screen):
        app._apply_item_edit(ItemEdit(comment="Looks good"), "wi-1")

        app.store.update_work_item.assert_not_called()
        app.store.add_comment.assert_called_once_with("wi-1", "Looks good")
        app.notify.assert_called_once_with("Comment added", timeout=2)

    def test_blank_title_rejected(self, app: TeamBoardApp, on_screen):
        app.store.update_work_item.side_effect = ValidationError("title")

        app._apply_item_edit(ItemEdit(changes={"title": ""}, comment="x"), "wi-1")

        app.notify.assert_called_once_with("Title is required", severity="error")
        app.store.add_comment.assert_not_called()
        on_screen.refresh_items.assert_not_called()

    def test_item_gone(self, app: TeamBoardApp, on_screen):
        app.store.update_work_item.return_value = None

        app._apply_item_edit(ItemEdit(changes={"title": "New"}), "gone")

        assert app.notify.call_args.kwargs["severity"] == "warning"

    def test_nothing_changed(self, app: TeamBoardApp, on_screen):
        app._apply_item_edit(ItemEdit(), "wi-1")
        app.notify.assert_not_called()


class TestSprintManagement:
    """Tests for creating, renaming and deleting sprints."""

    def test_new_sprint_opens_prompt(self, app: TeamBoardApp, on_screen):
        app.action_new_sprint()
        assert isinstance(app.push_screen.call_args[0][0], TextPromptModal)

    def test_new_sprint_becomes_active_when_none(self, app: TeamBoardApp, on_screen):
        app.store.add_sprint.return_value = Sprint(id="s9", name="Sprint 9", start_date=0)

        app.action_new_sprint()
        app.push_screen.call_args.kwargs["callback"]("Sprint 9")

        app.store.add_sprint.assert_called_once_with("Sprint 9")
        app.sprints.activate.assert_called_once_with("s9")
        app.notify.assert_called_once_with("Sprint created: Sprint 9", timeout=2)

    def test_new_sprint_keeps_existing_active(self, app: TeamBoardApp, on_screen):
        app.store.active_sprint = Sprint(id="s1", name="S1", start_date=0, is_active=True)
        app.store.add_sprint.return_value = Sprint(id="s2", name="S2", start_date=0)

        app._create_sprint("S2")

        app.sprints.activate.assert_not_called()

    def test_blank_sprint_name(self, app: TeamBoardApp, on_screen):
        app.store.add_sprint.side_effect = ValidationError("name")
        app._create_sprint("  ")
        app.notify.assert_called_once_with("Name is required", severity="error")

    def test_rename_active_sprint(self, app: TeamBoardApp, on_screen):
        app.store.active_sprint = Sprint(id="s1", name="S1", start_date=0, is_active=True)
        app.store.update_sprint.return_value = Sprint(id="s1", name="Launch", start_date=0)

        app.action_rename_sprint()
        modal = app.push_screen.call_args[0][0]
        assert isinstance(modal, TextPromptModal)
        assert modal.value == "S1"
        app.push_screen.call_args.kwargs["callback"]("Launch")

        app.store.update_sprint.assert_called_once_with("s1", name="Launch")
        app.notify.assert_called_once_with("Sprint renamed: Launch", timeout=2)

    def test_rename_without_sprint(self, app: TeamBoardApp, on_screen):
        app.action_rename_sprint()
        app.push_screen.assert_not_called()
        assert app.notify.call_args.kwargs["severity"] == "warning"

    def test_delete_sprint_confirms_then_activates_neighbour(self, app: TeamBoardApp, on_screen):
        app.store.active_sprint = Sprint(id="s2", name="S2", start_date=0, is_active=True)
        app.store.items_in_sprint.return_value = [make_item()]
        app.sprints.previous.return_value = Sprint(id="s1", name="S1", start_date=0)

        app.action_delete_sprint()
        assert isinstance(app.push_screen.call_args[0][0], ConfirmModal)
        app.store.delete_sprint.assert_not_called()
        app.push_screen.call_args.kwargs["callback"](True)

        app.store.delete_sprint.assert_called_once_with("s2")
        app.sprints.activate.assert_called_once_with("s1")
        app.notify.assert_called_once_with("Sprint deleted", timeout=2)

    def test_delete_sprint_declined(self, app: TeamBoardApp, on_screen):
        app.store.active_sprint = Sprint(id="s2", name="S2", start_date=0, is_active=True)
        app.store.items_in_sprint.return_value = []

        app.action_delete_sprint()
        app.push_screen.call_args.kwargs["callback"](False)

        app.store.delete_sprint.assert_not_called()


class TestPeople:
    """Tests for the people manager."""

    def test_opens_manager(self, app: TeamBoardApp, on_screen):
        app.store.people = [Person(id="p1", name="Alex")]
        app.action_people()
        assert isinstance(app.push_screen.call_args[0][0], PeopleModal)

    def test_add_person_reopens_manager(self, app: TeamBoardApp, on_screen):
        app.store.people = []
        app.store.add_person.return_value = Person(id="p9", name="Jo")

        app._apply_person_edit(PersonEdit(person_id=None, name="Jo"))

        app.store.add_person.assert_called_once_with("Jo")
        app.notify.assert_called_once_with("Added Jo", timeout=2)
        assert isinstance(app.push_screen.call_args[0][0], PeopleModal)

    def test_rename_person(self, app: TeamBoardApp, on_screen):
        app.store.people = []
        app.store.update_person.return_value = Person(id="p1", name="Alexandra")

        app._apply_person_edit(PersonEdit(person_id="p1", name="Alexandra"))

        app.store.update_person.assert_called_once_with("p1", name="Alexandra")
        app.notify.assert_called_once_with("Renamed to Alexandra", timeout=2)

    def test_blank_name(self, app: TeamBoardApp, on_screen):
        app.store.add_person.side_effect = ValidationError("name")

        app._apply_person_edit(PersonEdit(person_id=None, name=""))

        app.notify.assert_called_once_with("Name is required", severity="error")
        app.push_screen.assert_not_called()

    def test_remove_person_after_confirmation(self, app: TeamBoardApp, on_screen):
        app.store.people = []
        app.store.work_items = [make_item(assignee_id="p1")]
        app.store.delete_person.return_value = Person(id="p1", name="Alex")

        app._apply_person_edit(PersonEdit(person_id="p1", name="Alex", delete=True))
        modal = app.push_screen.call_args[0][0]
        assert isinstance(modal, ConfirmModal)
        assert modal.detail == "1 item(s) will be unassigned."
        app.store.delete_person.assert_not_called()

        app.push_screen.call_args.kwargs["callback"](True)

        app.store.delete_person.assert_called_once_with("p1")
        app.notify.assert_called_once_with("Removed Alex", timeout=2)
        assert isinstance(app.push_screen.call_args[0][0], PeopleModal)

    def test_cancelled_manager(self, app: TeamBoardApp, on_screen):
        app._apply_person_edit(None)
        app.store.add_person.assert_not_called()
        app.push_screen.assert_not_called()

    def test_filter_resolves_names(self, app: TeamBoardApp, on_screen):
        people = [Person(id="p1", name="Alex")]
        app.store.people = people
        event = MagicMock()
        event.input.id = "filter-input"
        event.value = "assignee:alex"

        app.on_input_submitted(event)

        app.filter_service.parse.assert_called_once_with("assignee:alex", people)
