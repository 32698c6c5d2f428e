"""Domain events for the MenuItem aggregate."""

from protean.fields import Float, Identifier, String

from pizzeria.domain import pizzeria


@pizzeria.event(part_of="MenuItem")
class MenuItemAdded:
    __version__ = 1

    menu_item_id: Identifier(required=True)
    title: String(required=True)
    price: Float(required=True)
