"""MenuItem aggregate: the global pizza catalog."""

from datetime import datetime

from protean.fields import DateTime, Float, String

from pizzeria.domain import pizzeria


@pizzeria.aggregate
class MenuItem:
    """A pizza on the menu. Items are only ever added, never edited."""

    title: String(required=True, max_length=100)
    description: String(max_length=500, default="")
    image: String(max_length=255, default="")
    price: Float(required=True, min_value=0.0)
    added_at: DateTime(default=datetime.now)

    @classmethod
    def add(cls, title, description, image, price):
        from pizzeria.menu.events import MenuItemAdded

        item = cls(title=title, description=description or "", image=image or "", price=price)
        item.raise_(MenuItemAdded(menu_item_id=item.id, title=item.title, price=item.price))
        return item

    def to_record(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "image": self.image,
            "price": self.price,
        }
