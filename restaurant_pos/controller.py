"""Session controller: runs router transitions and their side effects."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Iterable

from restaurant_pos.auth import PasswordAuth
from restaurant_pos.errors import AuthError, CollaboratorError, ValidationError
from restaurant_pos.models import Order, OrderLine
from restaurant_pos.persistence import SqliteStore
from restaurant_pos.router import (
    Action,
    Back,
    Capability,
    DataLoaded,
    Login,
    Logout,
    PlaceOrder,
    SelectTable,
    SessionState,
    ShowAdmin,
    ShowDashboard,
    can,
    can_place_order,
    selectable_table,
    transition,
)

logger = logging.getLogger(__name__)

NoticeCallback = Callable[[str, str], None]
TicketPrinter = Callable[[Order], None]


def _ignore_notice(message: str, severity: str) -> None:
    return None


def _ignore_change() -> None:
    return None


class PosController:
    """Owns the session state; every failure leaves that state untouched.

    ``on_notice(message, severity)`` receives user-facing messages with a
    severity of ``information``, ``warning`` or ``error``. ``on_change`` is
    called after any state replacement.
    """

    def __init__(
        self,
        store: SqliteStore,
        auth: PasswordAuth,
        on_notice: NoticeCallback | None = None,
        on_change: Callable[[], None] | None = None,
        ticket_printer: TicketPrinter | None = None,
    ) -> None:
        self.store = store
        self.auth = auth
        self.on_notice = on_notice or _ignore_notice
        self.on_change = on_change or _ignore_change
        self.ticket_printer = ticket_printer
        self.state = SessionState()

    def dispatch(self, action: Action) -> bool:
        """Apply an action; return whether the state changed."""
        next_state = transition(self.state, action)
        if next_state is self.state:
            return False
        if next_state.view != self.state.view:
            logger.info("view %s -> %s via %s", self.state.view, next_state.view, type(action).__name__)
        self.state = next_state
        self.on_change()
        return True

    # Session

    def login(self, username: str, password: str) -> bool:
        try:
            identity = self.auth.sign_in(username, password)
        except (AuthError, CollaboratorError) as exc:
            self.on_notice(exc.message, "error")
            return False
        self.dispatch(Login(identity))
        self.refresh()
        return True

    def sign_up(self, username: str, password: str) -> bool:
        try:
            identity = self.auth.sign_up(username, password)
        except (AuthError, CollaboratorError) as exc:
            self.on_notice(exc.message, "error")
            return False
        self.on_notice(f"Account {identity.display_name} created", "information")
        self.dispatch(Login(identity))
        self.refresh()
        return True

    def logout(self) -> None:
        self.dispatch(Logout())

    # Navigation

    def select_table(self, table_id: int) -> bool:
        if not selectable_table(self.state, table_id):
            self.on_notice(f"Table {table_id} is not available", "warning")
            return False
        return self.dispatch(SelectTable(table_id))

    def back(self) -> None:
        if self.dispatch(Back()):
            self.refresh()

    def show_admin(self) -> None:
        if not can(self.state.identity, "view_admin"):
            self.on_notice("Admin view requires the admin role", "warning")
            return
        if self.dispatch(ShowAdmin()):
            self.refresh()

    def show_dashboard(self) -> None:
        if self.dispatch(ShowDashboard()):
            self.refresh()

    # Orders

    def place_order(self, lines: Iterable[OrderLine]) -> Order | None:
        """Persist the cart for the current table and return to the dashboard."""
        lines = tuple(lines)
        state = self.state
        if not can_place_order(state, lines):
            self.on_notice("Add at least one item before placing the order", "warning")
            return None

        try:
            order = self.store.place_order(state.table_id, lines, submitter_id=state.identity.id)
        except (ValidationError, CollaboratorError) as exc:
            self.on_notice(exc.message, "error")
            self.refresh("tables")
            return None

        order = replace(order, submitted_by_name=state.identity.display_name)
        self.dispatch(PlaceOrder(lines))
        self.on_notice(f"Order placed for Table {order.table_id}: ${order.total}", "information")
        self._print_ticket(order)
        self.refresh()
        return order

    def _print_ticket(self, order: Order) -> None:
        if self.ticket_printer is None:
            return
        try:
            self.ticket_printer(order)
        except Exception as exc:
            logger.warning("ticket_print_failed order_id=%s error=%r", order.id, exc)
            self.on_notice(f"Order saved but ticket print failed: {exc}", "warning")

    # Data

    def refresh(self, *entities: str) -> bool:
        """Refetch collections (all when none given) and replace them wholesale."""
        if self.state.identity is None:
            return False
        wanted = set(entities) or {"tables", "menu", "orders", "users"}
        try:
            loaded = DataLoaded(
                tables=tuple(self.store.list_tables()) if "tables" in wanted else None,
                menu=tuple(self.store.list_menu_items(available=True)) if "menu" in wanted else None,
                orders=tuple(self.store.list_orders()) if "orders" in wanted else None,
                users=(
                    tuple(self.store.list_users())
                    if "users" in wanted and can(self.state.identity, "manage_users")
                    else None
                ),
            )
        except CollaboratorError as exc:
            self.on_notice(exc.message, "error")
            return False
        self.dispatch(loaded)
        return True

    def handle_change(self, entity: str) -> None:
        """React to an upstream change by refetching that collection."""
        self.refresh(entity)

    # Admin actions

    def start_preparing(self, order_id: str) -> bool:
        return self._admin_action(
            "manage_orders",
            lambda: self.store.update_order_status(order_id, "preparing"),
            "Order is being prepared",
            "orders",
        )

    def mark_served(self, order_id: str) -> bool:
        return self._admin_action(
            "manage_orders",
            lambda: self.store.update_order_status(order_id, "served"),
            "Order served",
            "orders",
        )

    def cancel_order(self, order_id: str) -> bool:
        return self._admin_action(
            "manage_orders",
            lambda: self.store.update_order_status(order_id, "cancelled"),
            "Order cancelled",
            "orders",
        )

    def amend_order(self, order_id: str, lines: Iterable[OrderLine]) -> bool:
        lines = tuple(lines)
        return self._admin_action(
            "manage_orders",
            lambda: self.store.replace_order_lines(order_id, lines),
            "Order updated",
            "orders",
        )

    def reserve_table(self, table_id: int) -> bool:
        return self._admin_action(
            "manage_tables",
            lambda: self.store.update_table_status(table_id, "reserved"),
            f"Table {table_id} reserved",
            "tables",
        )

    def unreserve_table(self, table_id: int) -> bool:
        return self._admin_action(
            "manage_tables",
            lambda: self.store.update_table_status(table_id, "available"),
            f"Table {table_id} is available",
            "tables",
        )

    def change_role(self, user_id: str, role: str) -> bool:
        identity = self.state.identity
        if identity is not None and identity.id == user_id:
            self.on_notice("You cannot change your own role", "warning")
            return False
        return self._admin_action(
            "manage_users",
            lambda: self.store.update_user_role(user_id, role),
            f"Role changed to {role}",
            "users",
        )

    def _admin_action(self, capability: Capability, write: Callable[[], object], success: str, entity: str) -> bool:
        if not can(self.state.identity, capability):
            self.on_notice("You are not allowed to do that", "warning")
            return False
        try:
            write()
        except (ValidationError, CollaboratorError) as exc:
            self.on_notice(exc.message, "error")
            return False
        self.on_notice(success, "information")
        self.refresh(entity)
        return True
