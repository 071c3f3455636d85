"""Editable seed data for the floor plan, menu and status vocabularies."""

from __future__ import annotations

ROLES: tuple[str, ...] = ("waiter", "admin")
TABLE_STATUSES: tuple[str, ...] = ("available", "occupied", "reserved")
ORDER_STATUSES: tuple[str, ...] = ("active", "preparing", "served", "cancelled")

# Allowed forward transitions for persisted orders.
ORDER_STATUS_TRANSITIONS: dict[str, set[str]] = {
    "active": {"preparing", "cancelled"},
    "preparing": {"served", "cancelled"},
    "served": set(),
    "cancelled": set(),
}

# Table changes a client may request directly. available -> occupied only
# happens through order placement.
TABLE_STATUS_TRANSITIONS: dict[str, set[str]] = {
    "available": {"reserved"},
    "reserved": {"available"},
    "occupied": set(),
}

DEFAULT_TABLE_COUNT = 16

SEAT_COUNT_OVERRIDES: dict[int, int] = {
    1: 2,
    2: 2,
    7: 6,
    8: 6,
    15: 8,
    16: 8,
}

# Prices are in cents.
DEFAULT_MENU: list[dict[str, str | int]] = [
    {"name": "Margherita Pizza", "price_cents": 1299, "category": "Pizza"},
    {"name": "Caesar Salad", "price_cents": 899, "category": "Salads"},
    {"name": "Grilled Chicken", "price_cents": 1599, "category": "Mains"},
    {"name": "Fish & Chips", "price_cents": 1499, "category": "Mains"},
    {"name": "Pasta Carbonara", "price_cents": 1399, "category": "Pasta"},
    {"name": "Chocolate Cake", "price_cents": 699, "category": "Desserts"},
    {"name": "Coffee", "price_cents": 399, "category": "Beverages"},
    {"name": "Orange Juice", "price_cents": 499, "category": "Beverages"},
]
