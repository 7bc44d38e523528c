"""Single-line text prompt."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label


class TextPromptModal(ModalScreen[str | None]):
    """Asks for one line of text, e.g. a sprint name.

    Returns the entered text (possibly blank), or None when cancelled.
    """

    DEFAULT_CSS = """
    TextPromptModal {
        align: center middle;
    }

    TextPromptModal > Vertical {
        width: 56;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: solid $primary;
    }

    TextPromptModal Label {
        margin-bottom: 1;
    }
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, heading: str, value: str = "", placeholder: str = "") -> None:
        super().__init__()
        self.heading = heading
        self.value = value
        self.placeholder = placeholder

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(self.heading)
            yield Input(value=self.value, placeholder=self.placeholder, id="prompt-input")

    def on_mount(self) -> None:
        self.query_one("#prompt-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.dismiss(event.value)

    def action_cancel(self) -> None:
        self.dismiss(None)
