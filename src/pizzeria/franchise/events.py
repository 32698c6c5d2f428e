"""Domain events for the Franchise aggregate."""

from protean.fields import DateTime, Identifier, String, Text

from pizzeria.domain import pizzeria


@pizzeria.event(part_of="Franchise")
class FranchiseCreated:
    __version__ = 1

    franchise_id: Identifier(required=True)
    name: String(required=True)
    admin_ids: Text()
    created_at: DateTime(required=True)


@pizzeria.event(part_of="Franchise")
class FranchiseDeleted:
    __version__ = 1

    franchise_id: Identifier(required=True)
    name: String(required=True)


@pizzeria.event(part_of="Franchise")
class StoreOpened:
    __version__ = 1

    franchise_id: Identifier(required=True)
    store_id: Identifier(required=True)
    name: String(required=True)


@pizzeria.event(part_of="Franchise")
class StoreClosed:
    __version__ = 1

    franchise_id: Identifier(required=True)
    store_id: Identifier(required=True)
