"""Rich text helpers shared by the screens."""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, Sequence, TypeVar

from rich.text import Text

from restaurant_pos.models import Order, Table

T = TypeVar("T")

STATUS_STYLES: dict[str, str] = {
    "available": "bold #0b1f0f on #5fbf72",
    "occupied": "bold #ffffff on #b23a48",
    "reserved": "bold #1f1600 on #e0b94f",
    "active": "bold #ffffff on #2f6db5",
    "preparing": "bold #1f1600 on #e0b94f",
    "served": "bold #0b1f0f on #5fbf72",
    "cancelled": "bold #ffffff on #6b6b6b",
    "admin": "bold #ffffff on #7a3fb2",
    "waiter": "bold #ffffff on #2f6db5",
}


def badge_style(status: str) -> str:
    """Return a consistent badge style for a status or role."""
    return STATUS_STYLES.get(status, "bold white on #444444")


def format_money(amount: Decimal) -> str:
    return f"${amount:.2f}"


def format_badge(status: str) -> Text:
    return Text(f" {status} ", style=badge_style(status))


def format_table_label(table: Table) -> Text:
    text = Text()
    text.append(f"Table {table.id:>2}", style="bold" if table.status == "available" else "dim")
    text.append(f"  {table.seat_count} seats  ")
    text.append_text(format_badge(table.status))
    return text


def format_order_header(order: Order) -> Text:
    text = Text()
    text.append(f"Table {order.table_id:>2}  ")
    text.append_text(format_badge(order.status))
    text.append(f"  {format_money(order.total)}", style="bold")
    text.append(f"  {order.created_at.astimezone().strftime('%Y-%m-%d %H:%M')}", style="dim")
    if order.submitted_by_name:
        text.append(f"  by {order.submitted_by_name}", style="dim")
    return text


def visible_rows(height: int) -> int:
    if height <= 0:
        return 8
    return max(1, height)


def window_bounds(total: int, rows: int, selected: int | None) -> tuple[int, int]:
    """Slice of ``total`` rows to show so that ``selected`` stays centered."""
    if total <= 0:
        return (0, 0)

    rows = max(1, rows)
    if total <= rows:
        return (0, total)

    if selected is None:
        start = 0
    else:
        half = rows // 2
        start = selected - half
        start = max(0, start)
        start = min(start, total - rows)

    return (start, start + rows)


def render_pointer_list(
    items: Sequence[T],
    selected: int | None,
    height: int,
    render: Callable[[T], Text],
    empty: str = "(nothing here)",
) -> Text:
    """Render a scrolling list with a ➤ pointer on the selected row."""
    if not items:
        return Text(empty, style="dim")

    start, end = window_bounds(len(items), visible_rows(height), selected)
    lines = Text()
    if start > 0:
        lines.append("⋮\n", style="dim")

    for idx in range(start, end):
        if idx > start:
            lines.append("\n")
        pointer = "➤ " if idx == selected else "  "
        lines.append(pointer)
        lines.append_text(render(items[idx]))

    if end < len(items):
        lines.append("\n⋮", style="dim")
    return lines
