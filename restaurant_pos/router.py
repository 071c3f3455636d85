"""Session and navigation state machine.

All navigation goes through ``transition(state, action)``, which never mutates
its input. Rejected actions return the very same state object, so callers can
detect a no-op with ``is``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Literal, Union

from restaurant_pos.models import Identity, MenuItem, Order, OrderLine, Table, UserAccount

logger = logging.getLogger(__name__)

View = Literal["login", "dashboard", "order", "admin"]
Capability = Literal["place_order", "view_admin", "manage_orders", "manage_tables", "manage_users"]

CAPABILITIES_BY_ROLE: dict[str, frozenset[str]] = {
    "waiter": frozenset({"place_order"}),
    "admin": frozenset({"place_order", "view_admin", "manage_orders", "manage_tables", "manage_users"}),
}


@dataclass(frozen=True)
class SessionState:
    view: View = "login"
    identity: Identity | None = None
    table_id: int | None = None
    tables: tuple[Table, ...] = ()
    menu: tuple[MenuItem, ...] = ()
    orders: tuple[Order, ...] = ()
    users: tuple[UserAccount, ...] = ()


@dataclass(frozen=True)
class Login:
    identity: Identity


@dataclass(frozen=True)
class Logout:
    pass


@dataclass(frozen=True)
class SelectTable:
    table_id: int


@dataclass(frozen=True)
class PlaceOrder:
    lines: tuple[OrderLine, ...]


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class ShowAdmin:
    pass


@dataclass(frozen=True)
class ShowDashboard:
    pass


@dataclass(frozen=True)
class DataLoaded:
    """Wholesale replacement of any collection that is not ``None``."""

    tables: tuple[Table, ...] | None = None
    menu: tuple[MenuItem, ...] | None = None
    orders: tuple[Order, ...] | None = None
    users: tuple[UserAccount, ...] | None = None


Action = Union[Login, Logout, SelectTable, PlaceOrder, Back, ShowAdmin, ShowDashboard, DataLoaded]


def can(identity: Identity | None, capability: Capability) -> bool:
    """Return whether the identity holds a capability."""
    if identity is None:
        return False
    return capability in CAPABILITIES_BY_ROLE.get(identity.role, frozenset())


def home_view(identity: Identity) -> View:
    """Screen a session lands on after login or when leaving order entry."""
    return "admin" if can(identity, "view_admin") else "dashboard"


def find_table(state: SessionState, table_id: int) -> Table | None:
    for table in state.tables:
        if table.id == table_id:
            return table
    return None


def selectable_table(state: SessionState, table_id: int) -> bool:
    """Only tables currently known as available can start an order."""
    table = find_table(state, table_id)
    return table is not None and table.status == "available"


def can_place_order(state: SessionState, lines: tuple[OrderLine, ...] | list[OrderLine]) -> bool:
    return (
        state.view == "order"
        and state.table_id is not None
        and bool(lines)
        and can(state.identity, "place_order")
    )


def transition(state: SessionState, action: Action) -> SessionState:
    """Apply one action and return the next state."""
    if isinstance(action, DataLoaded):
        return _apply_data(state, action)

    if isinstance(action, Login):
        if state.view != "login":
            return _reject(state, action, "already logged in")
        return replace(state, view=home_view(action.identity), identity=action.identity, table_id=None)

    if state.identity is None:
        return _reject(state, action, "no session")

    if isinstance(action, Logout):
        return SessionState()

    if isinstance(action, SelectTable):
        if state.view != "dashboard":
            return _reject(state, action, "not on dashboard")
        if not can(state.identity, "place_order"):
            return _reject(state, action, "missing place_order")
        if not selectable_table(state, action.table_id):
            return _reject(state, action, "table not available")
        return replace(state, view="order", table_id=action.table_id)

    if isinstance(action, PlaceOrder):
        if not can_place_order(state, action.lines):
            return _reject(state, action, "empty cart or not ordering")
        return replace(state, view="dashboard", table_id=None)

    if isinstance(action, Back):
        if state.view != "order":
            return _reject(state, action, "nothing to go back from")
        return replace(state, view=home_view(state.identity), table_id=None)

    if isinstance(action, ShowAdmin):
        if state.view != "dashboard" or not can(state.identity, "view_admin"):
            return _reject(state, action, "admin view not reachable")
        return replace(state, view="admin")

    if isinstance(action, ShowDashboard):
        if state.view != "admin":
            return _reject(state, action, "not on admin view")
        return replace(state, view="dashboard")

    return _reject(state, action, "unknown action")


def _apply_data(state: SessionState, action: DataLoaded) -> SessionState:
    changes = {
        name: value
        for name, value in (
            ("tables", action.tables),
            ("menu", action.menu),
            ("orders", action.orders),
            ("users", action.users),
        )
        if value is not None
    }
    if not changes:
        return state
    return replace(state, **changes)


def _reject(state: SessionState, action: Action, reason: str) -> SessionState:
    logger.debug("transition_rejected action=%s view=%s reason=%s", type(action).__name__, state.view, reason)
    return state
