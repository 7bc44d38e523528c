"""Dialog for creating a work item."""

from __future__ import annotations

from dataclasses import dataclass

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label, Select

from ...models import WorkItemType


@dataclass
class NewItemRequest:
    """What the user entered; validation happens in the store."""

    title: str
    type: WorkItemType


class NewItemModal(ModalScreen[NewItemRequest | None]):
    """Title and type for a new item, child task or blocker."""

    DEFAULT_CSS = """
    NewItemModal {
        align: center middle;
    }

    NewItemModal > Vertical {
        width: 64;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: solid $primary;
    }

    NewItemModal Input, NewItemModal Select {
        margin-bottom: 1;
    }
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, heading: str, default_type: WorkItemType = WorkItemType.TASK) -> None:
        super().__init__()
        self.heading = heading
        self.default_type = default_type

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(self.heading)
            yield Select(
                [(t.value, t) for t in WorkItemType],
                value=self.default_type,
                allow_blank=False,
                id="item-type",
            )
            yield Input(placeholder="Title (enter to save)", id="item-title")

    def on_mount(self) -> None:
        self.query_one("#item-title", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        item_type = self.query_one("#item-type", Select).value
        if not isinstance(item_type, WorkItemType):
            item_type = self.default_type
        self.dismiss(NewItemRequest(title=event.value, type=item_type))

    def action_cancel(self) -> None:
        self.dismiss(None)
