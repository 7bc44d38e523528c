"""Password gate screen."""

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Input, Static


class PasswordScreen(Screen):
    """Blocks the board until the shared password is entered."""

    DEFAULT_CSS = """
    PasswordScreen {
        align: center middle;
    }

    PasswordScreen > Vertical {
        width: 48;
        height: auto;
        padding: 1 2;
        border: solid $primary;
    }

    PasswordScreen .brand {
        text-style: bold;
        text-align: center;
        width: 100%;
    }

    PasswordScreen .subtitle {
        color: $text-muted;
        text-align: center;
        width: 100%;
        margin-bottom: 1;
    }

    PasswordScreen #password-error {
        color: $error;
        height: 1;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("TEAMBOARD", classes="brand")
            yield Static("TASK BOARD", classes="subtitle")
            yield Input(
                placeholder="Enter password to lock in...",
                password=True,
                id="password-input",
            )
            yield Static("", id="password-error")

    def on_mount(self) -> None:
        self.query_one("#password-input", Input).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        # Clearing the field after a wrong password also lands here
        if event.value:
            self.show_error("")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        if self.app.auth_service.authenticate(event.value):  # pyrefly: ignore[missing-attribute]
            self.app.unlock()  # pyrefly: ignore[missing-attribute]
            return
        event.input.value = ""
        self.show_error("Wrong password")

    def show_error(self, message: str) -> None:
        self.query_one("#password-error", Static).update(message)
