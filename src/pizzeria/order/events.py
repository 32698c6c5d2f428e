"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from pizzeria.domain import pizzeria


@pizzeria.event(part_of="Order")
class OrderPlaced:
    __version__ = 1

    order_id: String(required=True)
    user_id: Identifier(required=True)
    franchise_id: Identifier(required=True)
    store_id: Identifier(required=True)
    item_count: Integer(required=True)
    total: Float(required=True)
    placed_at: DateTime(required=True)
