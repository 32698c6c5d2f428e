"""Repository for the MenuItem aggregate."""

from pizzeria.domain import pizzeria
from pizzeria.menu.menu_item import MenuItem
from pizzeria.utils.paging import read_all


@pizzeria.repository(part_of=MenuItem)
class MenuItemRepository:
    def catalog(self) -> list[MenuItem]:
        """Every menu item, in the order it was added."""
        return read_all(self._dao.query.order_by("added_at"))
