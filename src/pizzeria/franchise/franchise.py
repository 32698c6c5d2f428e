"""Franchise aggregate with its administrators and stores."""

from datetime import datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, String

from pizzeria.domain import pizzeria


@pizzeria.entity(part_of="Franchise")
class FranchiseAdmin:
    """Snapshot of a user who administers the franchise."""

    user_id: Identifier(required=True)
    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)

    def to_record(self) -> dict:
        return {"id": str(self.user_id), "name": self.name, "email": self.email}


@pizzeria.entity(part_of="Franchise")
class Store:
    name: String(required=True, max_length=100)
    opened_at: DateTime(default=datetime.now)


@pizzeria.aggregate
class Franchise:
    """A named franchise. Stores belong to exactly one franchise for life."""

    name: String(required=True, max_length=100)
    admins: HasMany(FranchiseAdmin)
    stores: HasMany(Store)
    created_at: DateTime(default=datetime.now)

    @invariant.post
    def admins_are_unique(self):
        user_ids = [str(admin.user_id) for admin in self.admins]
        if len(user_ids) != len(set(user_ids)):
            raise ValidationError({"admins": ["A user can only be listed once as franchise admin"]})

    @classmethod
    def create(cls, name, admins):
        """Create a franchise administered by ``admins`` (User aggregates)."""
        from pizzeria.franchise.events import FranchiseCreated

        franchise = cls(name=name.strip())
        for user in admins:
            franchise.add_admins(FranchiseAdmin(user_id=user.id, name=user.name, email=user.email))

        franchise.raise_(
            FranchiseCreated(
                franchise_id=franchise.id,
                name=franchise.name,
                admin_ids=",".join(str(user.id) for user in admins),
                created_at=franchise.created_at,
            )
        )
        return franchise

    def store(self, store_id) -> Store | None:
        for store in self.stores:
            if str(store.id) == str(store_id):
                return store
        return None

    def open_store(self, name) -> Store:
        from pizzeria.franchise.events import StoreOpened

        store = Store(name=name.strip())
        self.add_stores(store)
        self.raise_(StoreOpened(franchise_id=self.id, store_id=store.id, name=store.name))
        return store

    def close_store(self, store: Store) -> None:
        from pizzeria.franchise.events import StoreClosed

        self.remove_stores(store)
        self.raise_(StoreClosed(franchise_id=self.id, store_id=store.id))

    def close(self) -> None:
        """Close every store ahead of deleting the franchise."""
        from pizzeria.franchise.events import FranchiseDeleted

        for store in list(self.stores):
            self.remove_stores(store)
        self.raise_(FranchiseDeleted(franchise_id=self.id, name=self.name))

    def admin_ids(self) -> list[str]:
        return [str(admin.user_id) for admin in self.admins]

    def to_record(self, include_admins=True, revenue_by_store=None) -> dict:
        revenue_by_store = revenue_by_store or {}
        record = {"id": str(self.id), "name": self.name}
        if include_admins:
            record["admins"] = [admin.to_record() for admin in self.admins]
        record["stores"] = [
            {
                "id": str(store.id),
                "name": store.name,
                "totalRevenue": round(revenue_by_store.get(str(store.id), 0.0), 4),
            }
            for store in self.stores
        ]
        return record


def store_record(franchise: Franchise, store: Store) -> dict:
    return {"id": str(store.id), "franchiseId": str(franchise.id), "name": store.name}
