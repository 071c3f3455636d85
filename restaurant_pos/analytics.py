"""Admin overview figures computed from loaded orders and tables."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from restaurant_pos.cart import money
from restaurant_pos.models import Order, Table


@dataclass(frozen=True)
class Overview:
    active_orders: int
    preparing_orders: int
    occupied_tables: int
    total_tables: int
    revenue: Decimal
    average_order: Decimal
    top_items: list[tuple[str, int]]


def billable(orders: Iterable[Order]) -> list[Order]:
    """Orders that count toward revenue; cancelled ones do not."""
    return [order for order in orders if order.status != "cancelled"]


def revenue(orders: Iterable[Order]) -> Decimal:
    return money(sum((order.total for order in billable(orders)), Decimal("0")))


def top_items(orders: Iterable[Order], limit: int = 5) -> list[tuple[str, int]]:
    """Best sellers by quantity; ties keep first-seen order."""
    counts: Counter[str] = Counter()
    for order in billable(orders):
        for line in order.lines:
            counts[line.name] += line.quantity
    return counts.most_common(limit)


def build_overview(orders: Iterable[Order], tables: Iterable[Table]) -> Overview:
    orders = list(orders)
    tables = list(tables)
    counted = billable(orders)
    total = revenue(counted)
    average = money(total / len(counted)) if counted else money(Decimal("0"))
    return Overview(
        active_orders=sum(1 for order in orders if order.status == "active"),
        preparing_orders=sum(1 for order in orders if order.status == "preparing"),
        occupied_tables=sum(1 for table in tables if table.status == "occupied"),
        total_tables=len(tables),
        revenue=total,
        average_order=average,
        top_items=top_items(counted),
    )
