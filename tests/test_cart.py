"""
Unit tests for the cart aggregator.
"""

import random
from decimal import Decimal

from restaurant_pos.cart import Cart
from restaurant_pos.models import MenuItem

PIZZA = MenuItem(id=1, name='Margherita Pizza', price=Decimal('12.99'), category='Pizza')
SALAD = MenuItem(id=2, name='Caesar Salad', price=Decimal('8.99'), category='Salads')
COFFEE = MenuItem(id=7, name='Coffee', price=Decimal('3.99'), category='Beverages')
MENU = [PIZZA, SALAD, COFFEE]


def snapshot(cart):
    return [(line.menu_item.id, line.quantity) for line in cart.lines()], cart.total()


class TestCartScenario:
    """Walk-through of adding and removing one dish."""

    def test_pizza_add_add_remove_remove(self):
        cart = Cart()
        assert cart.total() == Decimal('0.00')

        cart.add(PIZZA)
        assert cart.quantity_of(PIZZA.id) == 1
        assert cart.total() == Decimal('12.99')

        cart.add(PIZZA)
        assert cart.quantity_of(PIZZA.id) == 2
        assert cart.total() == Decimal('25.98')

        cart.remove(PIZZA.id)
        assert cart.quantity_of(PIZZA.id) == 1
        assert cart.total() == Decimal('12.99')

        cart.remove(PIZZA.id)
        assert cart.quantity_of(PIZZA.id) == 0
        assert cart.lines() == []
        assert cart.total() == Decimal('0.00')
        assert cart.is_empty()


class TestCartRules:
    """Tests for line merging, ordering and no-op removals."""

    def test_repeat_add_merges_into_one_line(self):
        cart = Cart()
        for _ in range(5):
            cart.add(SALAD)
        assert len(cart.lines()) == 1
        assert cart.quantity_of(SALAD.id) == 5
        assert cart.item_count() == 5

    def test_remove_missing_item_is_noop(self):
        cart = Cart()
        cart.add(COFFEE)
        before = snapshot(cart)
        cart.remove(PIZZA.id)
        assert snapshot(cart) == before

    def test_lines_keep_first_add_position(self):
        cart = Cart()
        cart.add(SALAD)
        cart.add(PIZZA)
        cart.add(COFFEE)
        cart.add(SALAD)
        cart.add(PIZZA)
        cart.remove(SALAD.id)
        assert [line.menu_item.id for line in cart.lines()] == [SALAD.id, PIZZA.id, COFFEE.id]

    def test_line_readded_after_removal_goes_last(self):
        cart = Cart()
        cart.add(PIZZA)
        cart.add(SALAD)
        cart.remove(PIZZA.id)
        cart.add(PIZZA)
        assert [line.menu_item.id for line in cart.lines()] == [SALAD.id, PIZZA.id]

    def test_lines_returns_copies(self):
        cart = Cart()
        cart.add(PIZZA)
        cart.lines()[0].quantity = 99
        assert cart.quantity_of(PIZZA.id) == 1

    def test_to_order_lines_captures_prices(self):
        cart = Cart()
        cart.add(PIZZA)
        cart.add(COFFEE)
        cart.add(COFFEE)
        lines = cart.to_order_lines()
        assert [(line.menu_item_id, line.name, line.quantity, line.unit_price) for line in lines] == [
            (1, 'Margherita Pizza', 1, Decimal('12.99')),
            (7, 'Coffee', 2, Decimal('3.99')),
        ]
        assert sum(line.subtotal for line in lines) == cart.total()

    def test_clear(self):
        cart = Cart()
        cart.add(PIZZA)
        cart.clear()
        assert cart.is_empty()
        assert cart.total() == Decimal('0.00')


class TestCartProperties:
    """Randomised add/remove sequences."""

    def test_never_holds_non_positive_quantities(self):
        rng = random.Random(1234)
        cart = Cart()
        for _ in range(500):
            item = rng.choice(MENU)
            if rng.random() < 0.5:
                cart.add(item)
            else:
                cart.remove(item.id)
            assert all(line.quantity >= 1 for line in cart.lines())

    def test_total_matches_quantities(self):
        rng = random.Random(99)
        cart = Cart()
        for _ in range(300):
            item = rng.choice(MENU)
            if rng.random() < 0.6:
                cart.add(item)
            else:
                cart.remove(item.id)
            expected = sum((cart.quantity_of(m.id) * m.price for m in MENU), Decimal('0'))
            assert cart.total() == expected

    def test_add_then_remove_restores_state(self):
        rng = random.Random(7)
        cart = Cart()
        for _ in range(50):
            cart.add(rng.choice(MENU))
        for item in MENU:
            before = snapshot(cart)
            cart.add(item)
            cart.remove(item.id)
            assert snapshot(cart) == before
