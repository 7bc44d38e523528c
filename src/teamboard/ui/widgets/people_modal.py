"""People manager dialog."""

from __future__ import annotations

from dataclasses import dataclass

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label, OptionList, Static
from textual.widgets.option_list import Option

from ...models import Person

NEW_PERSON = "__new__"


@dataclass
class PersonEdit:
    """One change from the people manager.

    person_id is None for a new person. Names are validated by the store.
    """

    person_id: str | None
    name: str
    delete: bool = False


class PeopleModal(ModalScreen[PersonEdit | None]):
    """Lists team members; add, rename or remove one at a time."""

    DEFAULT_CSS = """
    PeopleModal {
        align: center middle;
    }

    PeopleModal > Vertical {
        width: 56;
        height: auto;
        max-height: 80%;
        padding: 1 2;
        background: $surface;
        border: solid $primary;
    }

    PeopleModal Label {
        width: 100%;
        text-align: center;
        margin-bottom: 1;
        text-style: bold;
    }

    PeopleModal OptionList {
        height: auto;
        max-height: 12;
        margin-bottom: 1;
    }

    PeopleModal .hint {
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("ctrl+d", "delete_person", "Remove", show=False),
    ]

    def __init__(self, people: list[Person]) -> None:
        super().__init__()
        self._people = {p.id: p for p in people}
        self._selected: str | None = None

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label("Team")
            option_list = OptionList(id="people-list")
            for person in self._people.values():
                option_list.add_option(Option(escape(person.display_name), id=person.id))
            option_list.add_option(Option("[dim]+ New person[/]", id=NEW_PERSON))
            yield option_list
            yield Input(placeholder="Name (enter to save)", id="person-name")
            yield Static("enter: pick / save  ctrl+d: remove  esc: close", classes="hint")

    def on_mount(self) -> None:
        self.query_one(OptionList).focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        """Load the chosen person into the name field."""
        event.stop()
        person = self._people.get(event.option.id or "")
        self._selected = person.id if person else None
        name_input = self.query_one("#person-name", Input)
        name_input.value = person.name if person else ""
        name_input.focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.dismiss(PersonEdit(person_id=self._selected, name=event.value))

    def action_delete_person(self) -> None:
        option_list = self.query_one(OptionList)
        highlighted = option_list.highlighted
        person_id = self._selected
        if person_id is None and highlighted is not None:
            person_id = option_list.get_option_at_index(highlighted).id
        person = self._people.get(person_id or "")
        if person is not None:
            self.dismiss(PersonEdit(person_id=person.id, name=person.name, delete=True))

    def action_cancel(self) -> None:
        self.dismiss(None)
