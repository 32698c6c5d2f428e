"""Order aggregate: the immutable ledger of pizza orders.

Order ids come from :func:`next_ledger_id`: a zero-padded nanosecond counter
followed by the process id. Within one process the counter only ever grows,
so sorting by id is sorting by placement. The process suffix keeps ids from
concurrent workers on one host distinct; ordering between workers follows
their clocks.
"""

import os
import threading
import time
from datetime import datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, String

from pizzeria.domain import pizzeria

_ledger_lock = threading.Lock()
_last_ledger_value = 0


def next_ledger_id() -> str:
    global _last_ledger_value
    with _ledger_lock:
        _last_ledger_value = max(_last_ledger_value + 1, time.time_ns())
        return f"{_last_ledger_value:020d}{os.getpid() % 10_000_000:07d}"


@pizzeria.entity(part_of="Order")
class OrderItem:
    """One pizza on an order, priced as it was when ordered."""

    menu_id: Identifier(required=True)
    description: String(required=True, max_length=500)
    price: Float(required=True, min_value=0.0)

    def to_record(self) -> dict:
        return {
            "id": str(self.id),
            "menuId": str(self.menu_id),
            "description": self.description,
            "price": self.price,
        }


@pizzeria.aggregate
class Order:
    id: String(identifier=True, max_length=32, default=next_ledger_id)
    user_id: Identifier(required=True)
    franchise_id: Identifier(required=True)
    store_id: Identifier(required=True)
    placed_at: DateTime(default=datetime.now)
    items: HasMany(OrderItem)

    @invariant.post
    def order_has_items(self):
        if not self.items:
            raise ValidationError({"items": ["An order must contain at least one item"]})

    @classmethod
    def place(cls, user_id, franchise_id, store_id, lines):
        """Record a new order. ``lines`` are ``(menu_id, description, price)`` tuples."""
        from pizzeria.order.events import OrderPlaced

        order = cls(
            user_id=user_id,
            franchise_id=franchise_id,
            store_id=store_id,
            placed_at=datetime.now(),
            items=[OrderItem(menu_id=m, description=d, price=p) for m, d, p in lines],
        )
        order.raise_(
            OrderPlaced(
                order_id=order.id,
                user_id=order.user_id,
                franchise_id=order.franchise_id,
                store_id=order.store_id,
                item_count=len(order.items),
                total=order.total(),
                placed_at=order.placed_at,
            )
        )
        return order

    def total(self) -> float:
        return round(sum(item.price for item in self.items), 4)

    def to_record(self) -> dict:
        return {
            "id": str(self.id),
            "franchiseId": str(self.franchise_id),
            "storeId": str(self.store_id),
            "date": self.placed_at.isoformat(),
            "items": [item.to_record() for item in self.items],
        }
