"""Order entry screen for one table."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.widgets import Footer, Header, Static

from restaurant_pos.base_screen import PosScreen
from restaurant_pos.cart import Cart
from restaurant_pos.models import CartLine, MenuItem
from restaurant_pos.rendering import format_money, render_pointer_list


class OrderScreen(PosScreen):
    """Browse the menu and build a cart; the cart dies with the screen."""

    view_name = "order"

    BINDINGS = [
        ("up", "move(-1)", "Previous"),
        ("down", "move(1)", "Next"),
        ("k", "move(-1)", "Previous"),
        ("j", "move(1)", "Next"),
        ("enter", "add_selected", "Add"),
        ("plus", "add_selected", "Add"),
        ("minus", "remove_selected", "Remove"),
        ("backspace", "remove_selected", "Remove"),
        Binding("ctrl+s", "place_order", "Place order", priority=True),
        ("escape", "back", "Back"),
    ]

    CSS = """
    #order-header {
        border: heavy $secondary;
        padding: 0 1;
        height: 3;
    }

    #order-layout {
        height: 1fr;
    }

    #menu-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #cart-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #menu-list, #cart-list {
        height: 1fr;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    selected_index = reactive(0)

    def __init__(self, table_id: int) -> None:
        super().__init__()
        self.table_id = table_id
        self.cart = Cart()

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(id="order-header")
        with Horizontal(id="order-layout"):
            with Vertical(id="menu-pane"):
                yield Static("Menu", classes="pane-title")
                yield Static(id="menu-list")
            with Vertical(id="cart-pane"):
                yield Static("Current Order", classes="pane-title")
                yield Static(id="cart-list")
                yield Static(id="cart-total")
        yield Footer()

    def _menu(self) -> tuple[MenuItem, ...]:
        return self.controller.state.menu

    def _selected_item(self) -> MenuItem | None:
        menu = self._menu()
        if not (0 <= self.selected_index < len(menu)):
            return None
        return menu[self.selected_index]

    def _render_menu_item(self, item: MenuItem) -> Text:
        text = Text()
        text.append(f"{item.category:<10} ", style="dim")
        text.append(item.name)
        text.append(f"  {format_money(item.price)}", style="bold")
        quantity = self.cart.quantity_of(item.id)
        if quantity:
            text.append(f"  x{quantity}", style="bold #5fbf72")
        return text

    def _render_cart_line(self, line: CartLine) -> Text:
        text = Text()
        text.append(f"{line.quantity}x {line.menu_item.name}")
        text.append(f"  {format_money(line.menu_item.price * line.quantity)}", style="bold")
        return text

    def render_state(self) -> None:
        menu = self._menu()
        if menu and self.selected_index >= len(menu):
            self.selected_index = len(menu) - 1

        header = Text()
        header.append(f"Table {self.table_id}", style="bold")
        header.append(f"   {self.cart.item_count()} items   ")
        header.append("Enter/+ add, -/Backspace remove, Ctrl+S place order, Esc back", style="dim")
        self.query_one("#order-header", Static).update(header)

        menu_widget = self.query_one("#menu-list", Static)
        menu_widget.update(
            render_pointer_list(
                menu,
                self.selected_index if menu else None,
                menu_widget.size.height,
                self._render_menu_item,
                empty="(menu is empty)",
            )
        )

        cart_widget = self.query_one("#cart-list", Static)
        cart_widget.update(
            render_pointer_list(
                self.cart.lines(),
                None,
                cart_widget.size.height,
                self._render_cart_line,
                empty="(no items yet)",
            )
        )
        self.query_one("#cart-total", Static).update(Text(f"Total: {format_money(self.cart.total())}", style="bold"))

    def action_move(self, delta: int) -> None:
        menu = self._menu()
        if not menu:
            return
        self.selected_index = (self.selected_index + delta) % len(menu)
        self.refresh_view()

    def action_add_selected(self) -> None:
        item = self._selected_item()
        if item is None:
            return
        self.cart.add(item)
        self.refresh_view()

    def action_remove_selected(self) -> None:
        item = self._selected_item()
        if item is None:
            return
        self.cart.remove(item.id)
        self.refresh_view()

    def action_place_order(self) -> None:
        self.controller.place_order(self.cart.to_order_lines())

    def action_back(self) -> None:
        self.controller.back()
