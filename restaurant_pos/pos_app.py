"""Main Textual app class."""

from __future__ import annotations

import logging

from textual.app import App

from restaurant_pos.admin_screen import AdminScreen
from restaurant_pos.auth import PasswordAuth
from restaurant_pos.base_screen import PosScreen
from restaurant_pos.config import DEFAULT_ADMIN_PASSWORD, DEFAULT_ADMIN_USERNAME, POLL_SECONDS
from restaurant_pos.controller import PosController, TicketPrinter
from restaurant_pos.dashboard_screen import DashboardScreen
from restaurant_pos.errors import CollaboratorError
from restaurant_pos.login_screen import LoginScreen
from restaurant_pos.notifications import ChangeFeed
from restaurant_pos.order_screen import OrderScreen
from restaurant_pos.persistence import SqliteStore
from restaurant_pos.router import SessionState

logger = logging.getLogger(__name__)


class PosApp(App):
    """Terminal point-of-sale; the visible screen always mirrors the router view."""

    TITLE = "Restaurant POS"
    SUB_TITLE = "Tables / Orders"

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    def __init__(
        self,
        store: SqliteStore | None = None,
        ticket_printer: TicketPrinter | None = None,
        poll_seconds: float = POLL_SECONDS,
    ) -> None:
        super().__init__()
        self.store = store or SqliteStore()
        self.auth = PasswordAuth(self.store)
        self.feed = ChangeFeed(self.store)
        self.poll_seconds = poll_seconds
        self.controller = PosController(
            self.store,
            self.auth,
            on_notice=self._notice,
            on_change=self.sync_view,
            ticket_printer=ticket_printer,
        )

    def on_mount(self) -> None:
        try:
            self.store.bootstrap_schema()
            self.store.seed_defaults()
            self.auth.ensure_admin(DEFAULT_ADMIN_USERNAME, DEFAULT_ADMIN_PASSWORD)
            self.feed.prime()
        except CollaboratorError as exc:
            logger.warning("startup_failed error=%r", exc)
            self._notice(exc.message, "error")
        self.feed.subscribe(self.controller.handle_change)
        self.push_screen(LoginScreen())
        self.set_interval(self.poll_seconds, self._poll_changes)

    def _notice(self, message: str, severity: str) -> None:
        self.notify(message, severity=severity, timeout=4)

    def _poll_changes(self) -> None:
        if self.controller.state.identity is None:
            return
        try:
            self.feed.poll()
        except CollaboratorError as exc:
            logger.warning("poll_failed error=%r", exc)

    def _screen_for(self, state: SessionState) -> PosScreen:
        if state.view == "dashboard":
            return DashboardScreen()
        if state.view == "order" and state.table_id is not None:
            return OrderScreen(state.table_id)
        if state.view == "admin":
            return AdminScreen()
        return LoginScreen()

    def sync_view(self) -> None:
        """Show the screen for the current view, or re-render it in place."""
        if len(self.screen_stack) < 2:
            return
        state = self.controller.state
        current = self.screen
        if isinstance(current, PosScreen) and current.view_name == state.view:
            if state.view != "order" or getattr(current, "table_id", None) == state.table_id:
                current.refresh_view()
                return
        logger.debug("switch_screen view=%s", state.view)
        self.switch_screen(self._screen_for(state))
