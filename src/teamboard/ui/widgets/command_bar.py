"""Filter bar widget."""

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widget import Widget
from textual.widgets import Input, Static


class CommandBar(Widget):
    """Filter expression bar docked at the bottom of the work item screen."""

    DEFAULT_CSS = """
    CommandBar {
        height: 1;
        dock: bottom;
        background: $surface;
        display: none;
    }

    CommandBar.-visible {
        display: block;
    }

    CommandBar .mode-indicator {
        width: auto;
        padding: 0 1;
        background: $primary;
        color: $text;
    }

    CommandBar .filter-input {
        width: 1fr;
        border: none;
        background: $surface;
    }

    CommandBar .filter-input:focus {
        border: none;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self._expression = ""

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield Static("Filter:", classes="mode-indicator")
            yield Input(
                placeholder="login type:bug state:active assignee:unassigned blocker:true",
                id="filter-input",
                classes="filter-input",
            )

    def open(self) -> None:
        """Show the bar with the current expression ready to edit."""
        self.add_class("-visible")
        input_widget = self.query_one("#filter-input", Input)
        input_widget.value = self._expression
        input_widget.focus()

    def close(self) -> None:
        """Hide the bar, keeping the applied expression."""
        self.remove_class("-visible")

    def remember(self, expression: str) -> None:
        self._expression = expression.strip()

    @property
    def expression(self) -> str:
        return self._expression

    @property
    def is_open(self) -> bool:
        return self.has_class("-visible")
