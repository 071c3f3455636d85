"""
Tests for the admin overview figures.
"""

from datetime import datetime, timezone
from decimal import Decimal

from restaurant_pos.analytics import build_overview, revenue, top_items
from restaurant_pos.models import Order, OrderLine, Table

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_order(order_id, status, *lines):
    order_lines = tuple(
        OrderLine(menu_item_id=idx, name=name, quantity=qty, unit_price=Decimal(price))
        for idx, (name, qty, price) in enumerate(lines, start=1)
    )
    total = sum((line.subtotal for line in order_lines), Decimal('0'))
    return Order(id=order_id, table_id=1, lines=order_lines, total=total, status=status, created_at=NOW)


ORDERS = [
    make_order('a', 'active', ('Coffee', 2, '3.99'), ('Margherita Pizza', 1, '12.99')),
    make_order('b', 'preparing', ('Coffee', 1, '3.99')),
    make_order('c', 'served', ('Fish & Chips', 2, '14.99')),
    make_order('d', 'cancelled', ('Chocolate Cake', 9, '6.99')),
]
TABLES = [Table(id=1, status='occupied'), Table(id=2, status='available'), Table(id=3, status='reserved')]


def test_revenue_excludes_cancelled():
    assert revenue(ORDERS) == Decimal('54.94')


def test_top_items_by_quantity():
    assert top_items(ORDERS, limit=2) == [('Coffee', 3), ('Fish & Chips', 2)]


def test_overview():
    overview = build_overview(ORDERS, TABLES)
    assert overview.active_orders == 1
    assert overview.preparing_orders == 1
    assert overview.occupied_tables == 1
    assert overview.total_tables == 3
    assert overview.revenue == Decimal('54.94')
    assert overview.average_order == Decimal('18.31')


def test_overview_without_orders():
    overview = build_overview([], TABLES)
    assert overview.revenue == Decimal('0.00')
    assert overview.average_order == Decimal('0.00')
    assert overview.top_items == []
