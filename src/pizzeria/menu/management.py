"""Menu management: command and handler."""

from protean import handle
from protean.fields import Float, String
from protean.utils.globals import current_domain

from pizzeria.domain import pizzeria
from pizzeria.menu.menu_item import MenuItem


@pizzeria.command(part_of="MenuItem")
class AddMenuItem:
    title: String(required=True, max_length=100)
    description: String(max_length=500)
    image: String(max_length=255)
    price: Float(required=True, min_value=0.0)


@pizzeria.command_handler(part_of=MenuItem)
class AddMenuItemHandler:
    @handle(AddMenuItem)
    def add_menu_item(self, command):
        item = MenuItem.add(
            title=command.title,
            description=command.description,
            image=command.image,
            price=command.price,
        )
        current_domain.repository_for(MenuItem).add(item)
        return str(item.id)
