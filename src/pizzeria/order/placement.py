"""Order placement: command and handler.

The handler validates every reference before writing anything, then
records the order in a single unit of work.
"""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from pizzeria.domain import pizzeria
from pizzeria.errors import InvalidInput, NotFound
from pizzeria.franchise.franchise import Franchise
from pizzeria.menu.menu_item import MenuItem
from pizzeria.order.order import Order


@pizzeria.command(part_of="Order")
class PlaceOrder:
    """Place an order. ``items`` is a JSON list of ``{menuId, description, price}``."""

    user_id: Identifier(required=True)
    franchise_id: Identifier(required=True)
    store_id: Identifier(required=True)
    items: Text(required=True)


def _snapshot_lines(raw_items) -> list[tuple]:
    menu_repo = current_domain.repository_for(MenuItem)
    lines = []
    for raw in raw_items:
        if not isinstance(raw, dict) or not raw.get("menuId"):
            raise InvalidInput("each order item requires a menuId")
        try:
            menu_item = menu_repo.get(str(raw["menuId"]))
        except ObjectNotFoundError:
            raise NotFound(f"unknown menu item {raw['menuId']}")

        price = raw.get("price")
        if price is None:
            price = menu_item.price
        try:
            price = float(price)
        except (TypeError, ValueError):
            raise InvalidInput("order item price must be a number")
        if price < 0:
            raise InvalidInput("order item price must not be negative")

        lines.append((str(menu_item.id), raw.get("description") or menu_item.title, price))
    return lines


@pizzeria.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        raw_items = json.loads(command.items)
        if not raw_items:
            raise InvalidInput("order must contain at least one item")

        try:
            franchise = current_domain.repository_for(Franchise).get(command.franchise_id)
        except ObjectNotFoundError:
            raise NotFound("unknown franchise")
        if franchise.store(command.store_id) is None:
            raise NotFound("unknown store")

        order = Order.place(
            user_id=command.user_id,
            franchise_id=franchise.id,
            store_id=command.store_id,
            lines=_snapshot_lines(raw_items),
        )
        current_domain.repository_for(Order).add(order)
        return order.to_record()
