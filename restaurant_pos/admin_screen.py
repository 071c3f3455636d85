"""Admin panel: overview, order history, tables and user roles."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.widgets import Footer, Header, Static

from restaurant_pos.analytics import build_overview
from restaurant_pos.base_screen import PosScreen
from restaurant_pos.models import Order, UserAccount
from restaurant_pos.rendering import (
    format_badge,
    format_money,
    format_order_header,
    format_table_label,
    render_pointer_list,
)

PANES: tuple[str, ...] = ("orders", "tables", "users")


class AdminScreen(PosScreen):
    """Tab cycles the active pane; action keys apply to its selected row."""

    view_name = "admin"

    BINDINGS = [
        Binding("tab", "cycle_pane", "Next pane", priority=True),
        ("up", "move(-1)", "Previous"),
        ("down", "move(1)", "Next"),
        ("k", "move(-1)", "Previous"),
        ("j", "move(1)", "Next"),
        ("p", "start_preparing", "Preparing"),
        ("s", "mark_served", "Served"),
        ("c", "cancel_order", "Cancel order"),
        ("r", "toggle_reservation", "Reserve/Free"),
        ("o", "toggle_role", "Toggle role"),
        ("d", "show_dashboard", "Tables"),
        ("f5", "refresh_data", "Refresh"),
        ("ctrl+x", "logout", "Logout"),
    ]

    CSS = """
    #admin-overview {
        border: heavy $secondary;
        padding: 0 1;
        height: 5;
    }

    #admin-layout {
        height: 1fr;
    }

    #orders-pane {
        width: 3fr;
        border: round $surface;
        padding: 1;
    }

    #side-panes {
        width: 2fr;
    }

    #tables-pane, #users-pane {
        height: 1fr;
        border: round $surface;
        padding: 1;
    }

    .active-pane {
        border: round $primary;
    }

    #admin-orders, #admin-tables, #admin-users {
        height: 1fr;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    active_pane = reactive("orders")

    def __init__(self) -> None:
        super().__init__()
        self.selected: dict[str, int] = {pane: 0 for pane in PANES}

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(id="admin-overview")
        with Horizontal(id="admin-layout"):
            with Vertical(id="orders-pane"):
                yield Static("Orders", classes="pane-title")
                yield Static(id="admin-orders")
            with Vertical(id="side-panes"):
                with Vertical(id="tables-pane"):
                    yield Static("Tables", classes="pane-title")
                    yield Static(id="admin-tables")
                with Vertical(id="users-pane"):
                    yield Static("Users", classes="pane-title")
                    yield Static(id="admin-users")
        yield Footer()

    def _rows(self, pane: str) -> tuple:
        state = self.controller.state
        if pane == "orders":
            return state.orders
        if pane == "tables":
            return state.tables
        return state.users

    def _selected_row(self, pane: str):
        rows = self._rows(pane)
        idx = self.selected[pane]
        if not (0 <= idx < len(rows)):
            return None
        return rows[idx]

    def _render_order(self, order: Order) -> Text:
        text = format_order_header(order)
        for line in order.lines:
            text.append(f"\n      {line.quantity}x {line.name}  {format_money(line.subtotal)}", style="dim")
        return text

    def _render_user(self, user: UserAccount) -> Text:
        text = Text()
        text.append(f"{user.username:<16} ")
        text.append_text(format_badge(user.role))
        identity = self.controller.state.identity
        if identity is not None and identity.id == user.id:
            text.append("  (you)", style="dim")
        return text

    def render_state(self) -> None:
        state = self.controller.state
        overview = build_overview(state.orders, state.tables)

        summary = Text()
        summary.append(f"Active orders: {overview.active_orders}", style="bold")
        summary.append(f"   Preparing: {overview.preparing_orders}")
        summary.append(f"   Occupied tables: {overview.occupied_tables}/{overview.total_tables}")
        summary.append(f"\nRevenue: {format_money(overview.revenue)}", style="bold")
        summary.append(f"   Average order: {format_money(overview.average_order)}")
        if overview.top_items:
            best = ", ".join(f"{name} ({count})" for name, count in overview.top_items[:3])
            summary.append(f"\nTop sellers: {best}", style="dim")
        self.query_one("#admin-overview", Static).update(summary)

        for pane, widget_id, render, empty in (
            ("orders", "#admin-orders", self._render_order, "(no orders yet)"),
            ("tables", "#admin-tables", format_table_label, "(no tables)"),
            ("users", "#admin-users", self._render_user, "(no users)"),
        ):
            rows = self._rows(pane)
            if rows and self.selected[pane] >= len(rows):
                self.selected[pane] = len(rows) - 1
            selected = self.selected[pane] if rows and pane == self.active_pane else None
            widget = self.query_one(widget_id, Static)
            widget.update(render_pointer_list(rows, selected, widget.size.height, render, empty=empty))
            self.query_one(f"#{pane}-pane").set_class(pane == self.active_pane, "active-pane")

    def action_cycle_pane(self) -> None:
        idx = PANES.index(self.active_pane)
        self.active_pane = PANES[(idx + 1) % len(PANES)]
        self.refresh_view()

    def action_move(self, delta: int) -> None:
        rows = self._rows(self.active_pane)
        if not rows:
            return
        self.selected[self.active_pane] = (self.selected[self.active_pane] + delta) % len(rows)
        self.refresh_view()

    def _selected_order(self) -> Order | None:
        if self.active_pane != "orders":
            return None
        return self._selected_row("orders")

    def action_start_preparing(self) -> None:
        order = self._selected_order()
        if order is not None:
            self.controller.start_preparing(order.id)

    def action_mark_served(self) -> None:
        order = self._selected_order()
        if order is not None:
            self.controller.mark_served(order.id)

    def action_cancel_order(self) -> None:
        order = self._selected_order()
        if order is not None:
            self.controller.cancel_order(order.id)

    def action_toggle_reservation(self) -> None:
        if self.active_pane != "tables":
            return
        table = self._selected_row("tables")
        if table is None:
            return
        if table.status == "reserved":
            self.controller.unreserve_table(table.id)
        else:
            self.controller.reserve_table(table.id)

    def action_toggle_role(self) -> None:
        if self.active_pane != "users":
            return
        user = self._selected_row("users")
        if user is None:
            return
        self.controller.change_role(user.id, "waiter" if user.role == "admin" else "admin")

    def action_show_dashboard(self) -> None:
        self.controller.show_dashboard()

    def action_refresh_data(self) -> None:
        self.controller.refresh()

    def action_logout(self) -> None:
        self.controller.logout()
