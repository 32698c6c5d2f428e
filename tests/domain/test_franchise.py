"""Tests for the Franchise aggregate."""

from pizzeria.franchise.events import FranchiseCreated, FranchiseDeleted, StoreClosed, StoreOpened
from pizzeria.franchise.franchise import Franchise
from pizzeria.user.user import User


def _admin(name="Fran", email="fran@example.com"):
    return User.register(name=name, email=email, password_hash="hash")


class TestFranchiseCreate:
    def test_create_snapshots_admins(self):
        admin = _admin()
        franchise = Franchise.create(name=" Pizza Co ", admins=[admin])
        assert franchise.name == "Pizza Co"
        assert franchise.admin_ids() == [str(admin.id)]
        assert franchise.admins[0].to_record() == {"id": str(admin.id), "name": "Fran", "email": "fran@example.com"}
        assert isinstance(franchise._events[-1], FranchiseCreated)

    def test_new_franchise_has_no_stores(self):
        franchise = Franchise.create(name="Pizza Co", admins=[])
        assert franchise.to_record()["stores"] == []


class TestStores:
    def test_open_and_find_store(self):
        franchise = Franchise.create(name="Pizza Co", admins=[])
        store = franchise.open_store("Downtown")
        assert franchise.store(store.id) == store
        assert isinstance(franchise._events[-1], StoreOpened)

    def test_close_store(self):
        franchise = Franchise.create(name="Pizza Co", admins=[])
        store = franchise.open_store("Downtown")
        franchise.close_store(store)
        assert franchise.store(store.id) is None
        assert isinstance(franchise._events[-1], StoreClosed)

    def test_close_franchise_removes_every_store(self):
        franchise = Franchise.create(name="Pizza Co", admins=[])
        franchise.open_store("Downtown")
        franchise.open_store("Uptown")
        franchise.close()
        assert list(franchise.stores) == []
        assert isinstance(franchise._events[-1], FranchiseDeleted)


class TestFranchiseRecord:
    def test_admins_hidden_when_not_requested(self):
        franchise = Franchise.create(name="Pizza Co", admins=[_admin()])
        assert "admins" not in franchise.to_record(include_admins=False)

    def test_store_revenue_comes_from_lookup(self):
        franchise = Franchise.create(name="Pizza Co", admins=[])
        store = franchise.open_store("Downtown")
        record = franchise.to_record(revenue_by_store={str(store.id): 0.05})
        assert record["stores"] == [{"id": str(store.id), "name": "Downtown", "totalRevenue": 0.05}]
