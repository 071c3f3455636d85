"""
Tests for the SQLite data store.
"""

from decimal import Decimal

import pytest

from restaurant_pos.errors import CollaboratorError, ValidationError
from restaurant_pos.models import OrderLine
from restaurant_pos.persistence import SqliteStore


def twenty_dollar_lines():
    return [
        OrderLine(menu_item_id=1, name='Margherita Pizza', quantity=1, unit_price=Decimal('12.00')),
        OrderLine(menu_item_id=7, name='Coffee', quantity=2, unit_price=Decimal('4.00')),
    ]


def table_status(store, table_id):
    return next(table.status for table in store.list_tables() if table.id == table_id)


class TestSeed:
    def test_default_floor_and_menu(self, store):
        tables = store.list_tables()
        assert [table.id for table in tables] == list(range(1, 17))
        assert all(table.status == 'available' for table in tables)
        assert len(store.list_menu_items()) == 8

    def test_seed_is_idempotent(self, store):
        store.bootstrap_schema()
        store.seed_defaults()
        assert len(store.list_tables()) == 16
        assert len(store.list_menu_items()) == 8

    def test_menu_prices_are_decimals(self, store):
        pizza = next(item for item in store.list_menu_items() if item.name == 'Margherita Pizza')
        assert pizza.price == Decimal('12.99')
        assert pizza.category == 'Pizza'

    def test_unavailable_items_are_hidden(self, store):
        with store.connect() as conn:
            conn.execute("UPDATE menu_items SET available = 0 WHERE name = 'Coffee'")
        names = [item.name for item in store.list_menu_items()]
        assert 'Coffee' not in names
        assert 'Coffee' in [item.name for item in store.list_menu_items(available=False)]


class TestPlaceOrder:
    def test_order_for_table_three(self, store):
        order = store.place_order(3, twenty_dollar_lines())
        assert order.status == 'active'
        assert order.total == Decimal('20.00')
        assert table_status(store, 3) == 'occupied'

        saved = store.list_orders()
        assert len(saved) == 1
        assert saved[0].id == order.id
        assert saved[0].total == Decimal('20.00')
        assert [(line.name, line.quantity) for line in saved[0].lines] == [('Margherita Pizza', 1), ('Coffee', 2)]

    def test_occupied_table_rolls_back(self, store):
        store.place_order(3, twenty_dollar_lines())
        with pytest.raises(ValidationError):
            store.place_order(3, twenty_dollar_lines())
        assert len(store.list_orders()) == 1

    def test_reserved_table_rolls_back(self, store):
        store.update_table_status(4, 'reserved')
        with pytest.raises(ValidationError):
            store.place_order(4, twenty_dollar_lines())
        assert store.list_orders() == []
        assert table_status(store, 4) == 'reserved'

    def test_empty_order_rejected(self, store):
        with pytest.raises(ValidationError):
            store.place_order(2, [])
        assert table_status(store, 2) == 'available'

    def test_submitter_name_is_joined(self, store, waiter_account):
        store.place_order(1, twenty_dollar_lines(), submitter_id=waiter_account.id)
        assert store.list_orders()[0].submitted_by_name == 'wendy'

    def test_orders_listed_newest_first(self, store):
        first = store.place_order(1, twenty_dollar_lines())
        second = store.place_order(2, twenty_dollar_lines())
        assert [order.id for order in store.list_orders()] == [second.id, first.id]


class TestCreateOrder:
    def test_does_not_touch_table(self, store):
        store.create_order(5, twenty_dollar_lines(), Decimal('20.00'))
        assert table_status(store, 5) == 'available'

    def test_total_must_match_lines(self, store):
        with pytest.raises(ValidationError):
            store.create_order(5, twenty_dollar_lines(), Decimal('19.99'))
        assert store.list_orders() == []


class TestOrderStatus:
    def test_forward_flow(self, store):
        order = store.place_order(1, twenty_dollar_lines())
        store.update_order_status(order.id, 'preparing')
        store.update_order_status(order.id, 'served')
        assert store.list_orders()[0].status == 'served'

    def test_cancel_is_its_own_status(self, store):
        order = store.place_order(1, twenty_dollar_lines())
        store.update_order_status(order.id, 'cancelled')
        assert store.list_orders()[0].status == 'cancelled'

    @pytest.mark.parametrize('path', [['served'], ['preparing', 'active'], ['cancelled', 'preparing']])
    def test_invalid_transitions(self, store, path):
        order = store.place_order(1, twenty_dollar_lines())
        *allowed, rejected = path
        for status in allowed:
            store.update_order_status(order.id, status)
        with pytest.raises(ValidationError):
            store.update_order_status(order.id, rejected)

    def test_unknown_order(self, store):
        with pytest.raises(ValidationError):
            store.update_order_status('missing', 'preparing')


class TestReplaceLines:
    def test_total_is_recomputed(self, store):
        order = store.place_order(1, twenty_dollar_lines())
        new_lines = [OrderLine(menu_item_id=2, name='Caesar Salad', quantity=3, unit_price=Decimal('8.99'))]
        total = store.replace_order_lines(order.id, new_lines)
        assert total == Decimal('26.97')
        saved = store.list_orders()[0]
        assert saved.total == Decimal('26.97')
        assert [(line.name, line.quantity) for line in saved.lines] == [('Caesar Salad', 3)]

    def test_closed_order_cannot_change(self, store):
        order = store.place_order(1, twenty_dollar_lines())
        store.update_order_status(order.id, 'cancelled')
        with pytest.raises(ValidationError):
            store.replace_order_lines(order.id, twenty_dollar_lines())

    def test_empty_replacement_rejected(self, store):
        order = store.place_order(1, twenty_dollar_lines())
        with pytest.raises(ValidationError):
            store.replace_order_lines(order.id, [])
        assert len(store.list_orders()[0].lines) == 2


class TestTableStatus:
    def test_reserve_and_release(self, store):
        store.update_table_status(6, 'reserved')
        assert table_status(store, 6) == 'reserved'
        store.update_table_status(6, 'available')
        assert table_status(store, 6) == 'available'

    def test_cannot_occupy_directly(self, store):
        with pytest.raises(ValidationError):
            store.update_table_status(6, 'occupied')

    def test_cannot_reserve_occupied(self, store):
        store.place_order(6, twenty_dollar_lines())
        with pytest.raises(ValidationError):
            store.update_table_status(6, 'reserved')

    def test_unknown_table(self, store):
        with pytest.raises(ValidationError):
            store.update_table_status(99, 'reserved')


class TestUsers:
    def test_role_update(self, store, waiter_account):
        store.update_user_role(waiter_account.id, 'admin')
        assert [(user.username, user.role) for user in store.list_users()] == [('wendy', 'admin')]

    def test_unknown_role(self, store, waiter_account):
        with pytest.raises(ValidationError):
            store.update_user_role(waiter_account.id, 'chef')

    def test_unknown_user(self, store):
        with pytest.raises(ValidationError):
            store.update_user_role('missing', 'admin')


class TestRevisions:
    def test_writes_bump_revisions(self, store):
        before = store.revisions()
        store.place_order(1, twenty_dollar_lines())
        after = store.revisions()
        assert after['orders'] == before['orders'] + 1
        assert after['tables'] == before['tables'] + 1
        assert after['users'] == before['users']

    def test_failed_write_does_not_bump(self, store):
        before = store.revisions()
        with pytest.raises(ValidationError):
            store.update_table_status(99, 'reserved')
        assert store.revisions() == before


def test_store_failure_is_collaborator_error(tmp_path):
    store = SqliteStore(tmp_path / 'empty.db')
    with pytest.raises(CollaboratorError):
        store.list_tables()
