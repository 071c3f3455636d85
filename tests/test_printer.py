"""
Tests for kitchen ticket layout.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from restaurant_pos import printer
from restaurant_pos.models import Order, OrderLine


def make_order():
    return Order(
        id='0123456789abcdef',
        table_id=7,
        lines=(
            OrderLine(menu_item_id=1, name='Margherita Pizza', quantity=2, unit_price=Decimal('12.99')),
            OrderLine(menu_item_id=7, name='Coffee', quantity=1, unit_price=Decimal('3.99')),
        ),
        total=Decimal('29.97'),
        status='active',
        created_at=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
        submitted_by_name='wendy',
    )


def test_ticket_lines():
    lines = printer.ticket_lines(make_order())
    assert lines[0] == 'Table 7'
    assert lines[1].startswith('#01234567')
    assert lines[2:] == ['2x Margherita Pizza', '1x Coffee', 'by wendy']


def test_font_override_wins(tmp_path, monkeypatch):
    font = tmp_path / 'ticket.ttf'
    font.write_bytes(b'')
    monkeypatch.setenv('POS_PRINTER_FONT_PATH', str(font))
    assert printer.resolve_printer_font_path() == str(font)


def test_missing_font_raises(monkeypatch):
    monkeypatch.delenv('POS_PRINTER_FONT_PATH', raising=False)
    monkeypatch.setattr(printer, 'PRINTER_FONT_PATH', '/nonexistent/font.ttf')
    monkeypatch.setattr(printer, '_LINUX_FONT_FALLBACKS', ())
    with pytest.raises(RuntimeError):
        printer.resolve_printer_font_path()
