"""Dashboard overlay."""

from __future__ import annotations

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Static

from ...services import DashboardSummary


def _count_lines(pairs: list[tuple[str, int]]) -> str:
    if not pairs:
        return "[dim]No active items[/]"
    return "\n".join(f"{escape(name):<24} [b]{count}[/]" for name, count in pairs)


class DashboardScreen(ModalScreen[None]):
    """Team size, active/done counts, blockers and active work breakdowns."""

    DEFAULT_CSS = """
    DashboardScreen {
        align: center middle;
    }

    DashboardScreen > VerticalScroll {
        width: 80%;
        height: 80%;
        padding: 1 2;
        background: $surface;
        border: solid $primary;
    }

    DashboardScreen .stats Static {
        width: 1fr;
        padding: 0 1;
        border: round $primary-darken-2;
        text-align: center;
    }

    DashboardScreen .stats {
        height: auto;
        margin-bottom: 1;
    }

    DashboardScreen .panel {
        width: 1fr;
        padding: 0 1;
    }

    DashboardScreen .blockers {
        border: round $error;
        padding: 0 1;
        height: auto;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("q", "close", "Close", show=False),
    ]

    def __init__(self, summary: DashboardSummary, assignee_names: dict[str, str]) -> None:
        super().__init__()
        self.summary = summary
        self.assignee_names = assignee_names

    def compose(self) -> ComposeResult:
        s = self.summary
        with VerticalScroll():
            yield Static("[b]LOCK-IN STATUS[/]")
            with Horizontal(classes="stats"):
                yield Static(f"[b]{s.team_size}[/]\nTEAM SIZE")
                yield Static(f"[b]{s.active_count}[/]\nACTIVE")
                yield Static(f"[b red]{s.blocker_count}[/]\nBLOCKERS")
                yield Static(f"[b green]{s.done_count}[/]\nDONE")
            with Horizontal(classes="stats"):
                with Vertical(classes="panel"):
                    yield Static("[dim]ACTIVE BY ASSIGNEE[/]")
                    yield Static(_count_lines(s.active_by_assignee))
                with Vertical(classes="panel"):
                    yield Static("[dim]ACTIVE BY TYPE[/]")
                    yield Static(_count_lines(s.active_by_type))
            if s.blockers:
                lines = [
                    f"⚠ {escape(b.title)}  [dim]{escape(self.assignee_names.get(b.id, 'Unassigned'))}[/]"
                    for b in s.blockers
                ]
                yield Static("[b red]ACTIVE BLOCKERS[/]\n" + "\n".join(lines), classes="blockers")

    def action_close(self) -> None:
        self.dismiss(None)
