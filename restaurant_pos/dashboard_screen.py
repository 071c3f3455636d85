"""Table dashboard screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.reactive import reactive
from textual.widgets import Footer, Header, Static

from restaurant_pos.base_screen import PosScreen
from restaurant_pos.rendering import format_badge, format_table_label, render_pointer_list
from restaurant_pos.router import can


class DashboardScreen(PosScreen):
    """Pick an available table to start an order."""

    view_name = "dashboard"

    BINDINGS = [
        ("up", "move(-1)", "Previous"),
        ("down", "move(1)", "Next"),
        ("k", "move(-1)", "Previous"),
        ("j", "move(1)", "Next"),
        ("enter", "select_table", "Order"),
        ("a", "show_admin", "Admin"),
        ("f5", "refresh_data", "Refresh"),
        ("ctrl+x", "logout", "Logout"),
    ]

    CSS = """
    #dashboard-summary {
        border: heavy $secondary;
        padding: 0 1;
        height: 3;
    }

    #tables-pane {
        height: 1fr;
        border: round $primary;
        padding: 1;
    }

    #tables-list {
        height: 1fr;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    selected_index = reactive(0)

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(id="dashboard-summary")
        with Vertical(id="tables-pane"):
            yield Static("Tables", classes="pane-title")
            yield Static(id="tables-list")
        yield Footer()

    def render_state(self) -> None:
        state = self.controller.state
        tables = state.tables
        if tables and self.selected_index >= len(tables):
            self.selected_index = len(tables) - 1

        counts = {status: sum(1 for t in tables if t.status == status) for status in ("available", "occupied", "reserved")}
        summary = Text()
        if state.identity is not None:
            summary.append(f"Welcome, {state.identity.display_name} ")
            summary.append_text(format_badge(state.identity.role))
            summary.append("   ")
        for status, count in counts.items():
            summary.append(f"{count} ")
            summary.append_text(format_badge(status))
            summary.append("  ")
        self.query_one("#dashboard-summary", Static).update(summary)

        widget = self.query_one("#tables-list", Static)
        widget.update(
            render_pointer_list(
                tables,
                self.selected_index if tables else None,
                widget.size.height,
                format_table_label,
                empty="(no tables)",
            )
        )

    def action_move(self, delta: int) -> None:
        tables = self.controller.state.tables
        if not tables:
            return
        self.selected_index = (self.selected_index + delta) % len(tables)
        self.refresh_view()

    def action_select_table(self) -> None:
        tables = self.controller.state.tables
        if not tables:
            return
        self.controller.select_table(tables[self.selected_index].id)

    def action_show_admin(self) -> None:
        if not can(self.controller.state.identity, "view_admin"):
            return
        self.controller.show_admin()

    def action_refresh_data(self) -> None:
        self.controller.refresh()

    def action_logout(self) -> None:
        self.controller.logout()
