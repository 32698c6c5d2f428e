"""Tests for the Order aggregate and ledger identifiers."""

import os

import pytest
from protean.exceptions import ValidationError

from pizzeria.order.events import OrderPlaced
from pizzeria.order.order import Order, next_ledger_id


def _place(lines=None):
    return Order.place(
        user_id="user-1",
        franchise_id="franchise-1",
        store_id="store-1",
        lines=lines or [("menu-1", "Veggie", 0.0038), ("menu-2", "Pepperoni", 0.0042)],
    )


class TestLedgerIds:
    def test_ids_strictly_increase(self):
        ids = [next_ledger_id() for _ in range(50)]
        assert ids == sorted(ids)
        assert len(set(ids)) == 50

    def test_ids_sort_lexicographically(self):
        first, second = next_ledger_id(), next_ledger_id()
        assert len(first) == len(second)
        assert first < second

    def test_ids_carry_the_process_id(self):
        assert next_ledger_id().endswith(f"{os.getpid() % 10_000_000:07d}")


class TestOrderPlace:
    def test_items_keep_submitted_order_and_prices(self):
        order = _place()
        assert [(i.menu_id, i.description, i.price) for i in order.items] == [
            ("menu-1", "Veggie", 0.0038),
            ("menu-2", "Pepperoni", 0.0042),
        ]
        assert order.total() == 0.008

    def test_place_raises_order_placed(self):
        order = _place()
        event = order._events[-1]
        assert isinstance(event, OrderPlaced)
        assert event.item_count == 2
        assert event.order_id == order.id

    def test_order_without_items_is_invalid(self):
        with pytest.raises(ValidationError):
            Order(user_id="user-1", franchise_id="franchise-1", store_id="store-1")

    def test_record_uses_client_field_names(self):
        record = _place().to_record()
        assert set(record) == {"id", "franchiseId", "storeId", "date", "items"}
        assert set(record["items"][0]) == {"id", "menuId", "description", "price"}
