"""In-memory cart used while composing an order for one table."""

from __future__ import annotations

from decimal import Decimal

from restaurant_pos.models import CartLine, MenuItem, OrderLine

CENTS = Decimal("0.01")


def money(amount: Decimal) -> Decimal:
    """Quantize an amount to cents."""
    return amount.quantize(CENTS)


class Cart:
    """Merges repeated item additions into one line per menu item.

    Lines keep the position of the first add; later adds and removes only
    change quantities. A line is dropped as soon as its quantity would fall
    below 1.
    """

    def __init__(self) -> None:
        self._lines: dict[int, CartLine] = {}

    def add(self, menu_item: MenuItem) -> None:
        line = self._lines.get(menu_item.id)
        if line is None:
            self._lines[menu_item.id] = CartLine(menu_item=menu_item, quantity=1)
            return
        line.quantity += 1

    def remove(self, menu_item_id: int) -> None:
        line = self._lines.get(menu_item_id)
        if line is None:
            return
        if line.quantity > 1:
            line.quantity -= 1
            return
        del self._lines[menu_item_id]

    def quantity_of(self, menu_item_id: int) -> int:
        line = self._lines.get(menu_item_id)
        if line is None:
            return 0
        return line.quantity

    def total(self) -> Decimal:
        return money(sum((line.menu_item.price * line.quantity for line in self._lines.values()), Decimal("0")))

    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def lines(self) -> list[CartLine]:
        return [CartLine(menu_item=line.menu_item, quantity=line.quantity) for line in self._lines.values()]

    def is_empty(self) -> bool:
        return not self._lines

    def clear(self) -> None:
        self._lines.clear()

    def to_order_lines(self) -> list[OrderLine]:
        """Freeze the cart into submission rows, capturing current unit prices."""
        return [
            OrderLine(
                menu_item_id=line.menu_item.id,
                name=line.menu_item.name,
                quantity=line.quantity,
                unit_price=line.menu_item.price,
            )
            for line in self._lines.values()
        ]
