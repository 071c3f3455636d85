"""Domain models for restaurant-pos."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Literal

Role = Literal["waiter", "admin"]
TableStatus = Literal["available", "occupied", "reserved"]
OrderStatus = Literal["active", "preparing", "served", "cancelled"]


@dataclass(frozen=True)
class Identity:
    """The authenticated user for the current session."""

    id: str
    display_name: str
    role: Role


@dataclass(frozen=True)
class Table:
    """A physical seating unit."""

    id: int
    status: TableStatus
    seat_count: int = 4


@dataclass(frozen=True)
class MenuItem:
    """An orderable dish with its current price."""

    id: int
    name: str
    price: Decimal
    category: str


@dataclass
class CartLine:
    """An in-progress cart row; quantity is always at least 1."""

    menu_item: MenuItem
    quantity: int = 1


@dataclass(frozen=True)
class OrderLine:
    """A submitted order row with the unit price captured at order time."""

    menu_item_id: int
    name: str
    quantity: int
    unit_price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Order:
    """A persisted order billed against a table."""

    id: str
    table_id: int
    lines: tuple[OrderLine, ...]
    total: Decimal
    status: OrderStatus
    created_at: datetime
    submitted_by: str | None = None
    submitted_by_name: str | None = None


@dataclass(frozen=True)
class UserAccount:
    """A user row as shown in the admin panel."""

    id: str
    username: str
    role: Role
    created_at: str | None = None
