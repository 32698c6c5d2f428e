"""Application tests for franchise and store management."""

import json

import pytest
from protean import current_domain

from pizzeria.errors import InternalError, InvalidInput, NotFound
from pizzeria.franchise.franchise import Franchise
from pizzeria.franchise.management import CreateFranchise, DeleteFranchise
from pizzeria.franchise.repository import FranchiseRepository
from pizzeria.franchise.stores import CreateStore, DeleteStore
from pizzeria.franchise.views import franchise_record, list_franchises, user_franchises
from pizzeria.menu.management import AddMenuItem
from pizzeria.order.placement import PlaceOrder
from pizzeria.user.user import RoleName, User
from pizzeria.utils.commands import process


def _create_franchise(name="Pizza Co", emails=()):
    return current_domain.process(
        CreateFranchise(name=name, admin_emails=json.dumps(list(emails))),
        asynchronous=False,
    )


def _create_store(franchise_id, name="Downtown"):
    return current_domain.process(CreateStore(franchise_id=franchise_id, name=name), asynchronous=False)


class TestCreateFranchise:
    def test_admins_gain_franchisee_role(self, register):
        fran = register(name="Fran", email="fran@example.com")
        franchise_id = _create_franchise(emails=["fran@example.com"])

        user = current_domain.repository_for(User).get(fran.id)
        assert user.has_role(RoleName.FRANCHISEE, franchise_id)
        franchise = current_domain.repository_for(Franchise).get(franchise_id)
        assert franchise.admin_ids() == [str(fran.id)]

    def test_unknown_admin_email(self):
        with pytest.raises(NotFound) as exc:
            _create_franchise(emails=["ghost@example.com"])
        assert exc.value.message == "unknown user for franchise admin ghost@example.com provided"
        assert current_domain.repository_for(Franchise).find_by_name("Pizza Co") is None

    def test_duplicate_name(self):
        _create_franchise()
        with pytest.raises(InvalidInput):
            _create_franchise()


class TestDeleteFranchise:
    def test_delete_cascades_stores_and_roles(self, register):
        fran = register(name="Fran", email="fran@example.com")
        franchise_id = _create_franchise(emails=["fran@example.com"])
        _create_store(franchise_id)

        current_domain.process(DeleteFranchise(franchise_id=franchise_id), asynchronous=False)

        assert current_domain.repository_for(Franchise).find_by_name("Pizza Co") is None
        user = current_domain.repository_for(User).get(fran.id)
        assert user.franchise_ids() == []
        assert user.has_role(RoleName.DINER)

    def test_deleting_missing_franchise_is_a_no_op(self):
        current_domain.process(DeleteFranchise(franchise_id="missing"), asynchronous=False)

    def test_failed_delete_leaves_franchise_intact(self, monkeypatch, register):
        fran = register(name="Fran", email="fran@example.com")
        franchise_id = _create_franchise(emails=["fran@example.com"])
        _create_store(franchise_id)

        def unavailable(self, franchise):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(FranchiseRepository, "remove", unavailable)
        with pytest.raises(InternalError) as exc:
            process(DeleteFranchise(franchise_id=franchise_id), failure_message="unable to delete franchise")
        assert exc.value.message == "unable to delete franchise"

        franchise = current_domain.repository_for(Franchise).get(franchise_id)
        assert [store.name for store in franchise.stores] == ["Downtown"]
        user = current_domain.repository_for(User).get(fran.id)
        assert user.has_role(RoleName.FRANCHISEE, franchise_id)


class TestStores:
    def test_create_store_returns_record(self):
        franchise_id = _create_franchise()
        store = _create_store(franchise_id)
        assert store["franchiseId"] == franchise_id
        assert store["name"] == "Downtown"

    def test_create_store_in_missing_franchise(self):
        with pytest.raises(NotFound):
            _create_store("missing")

    def test_delete_store(self):
        franchise_id = _create_franchise()
        store = _create_store(franchise_id)
        current_domain.process(DeleteStore(franchise_id=franchise_id, store_id=store["id"]), asynchronous=False)
        assert list(current_domain.repository_for(Franchise).get(franchise_id).stores) == []

    def test_delete_missing_store(self):
        franchise_id = _create_franchise()
        with pytest.raises(NotFound) as exc:
            current_domain.process(DeleteStore(franchise_id=franchise_id, store_id="missing"), asynchronous=False)
        assert exc.value.message == "unknown store"


class TestFranchiseViews:
    def test_admins_visible_only_to_admin_callers(self, register, caller_for):
        register(name="Fran", email="fran@example.com")
        _create_franchise(emails=["fran@example.com"])
        admin = caller_for(register(name="Root", email="root@example.com", admin=True))
        diner = caller_for(register(name="Dee", email="dee@example.com"))

        assert "admins" in list_franchises(admin)[0]
        assert "admins" not in list_franchises(diner)[0]

    def test_name_filter(self, register, caller_for):
        _create_franchise(name="Pizza Co")
        _create_franchise(name="Slice Bros")
        diner = caller_for(register())
        assert [f["name"] for f in list_franchises(diner, name="slice")] == ["Slice Bros"]

    def test_user_franchises_limited_to_self_or_admin(self, register, caller_for):
        fran = register(name="Fran", email="fran@example.com")
        _create_franchise(emails=["fran@example.com"])
        other = caller_for(register(name="Dee", email="dee@example.com"))
        admin = caller_for(register(name="Root", email="root@example.com", admin=True))

        assert [f["name"] for f in user_franchises(caller_for(fran), fran.id)] == ["Pizza Co"]
        assert len(user_franchises(admin, fran.id)) == 1
        assert user_franchises(other, fran.id) == []

    def test_listing_reads_past_one_batch(self, monkeypatch, register, caller_for):
        monkeypatch.setattr("pizzeria.utils.paging.BATCH_SIZE", 2)
        names = [f"Franchise {n}" for n in range(5)]
        for name in names:
            _create_franchise(name=name)

        assert [f["name"] for f in list_franchises(caller_for(register()))] == names

    def test_revenue_counts_every_order(self, monkeypatch, register, caller_for):
        monkeypatch.setattr("pizzeria.utils.paging.BATCH_SIZE", 2)
        diner = register()
        franchise_id = _create_franchise()
        store = _create_store(franchise_id)
        menu_id = current_domain.process(AddMenuItem(title="Veggie", price=0.05), asynchronous=False)
        for _ in range(5):
            current_domain.process(
                PlaceOrder(
                    user_id=diner.id,
                    franchise_id=franchise_id,
                    store_id=store["id"],
                    items=json.dumps([{"menuId": menu_id, "description": "Veggie", "price": 0.05}]),
                ),
                asynchronous=False,
            )

        record = franchise_record(franchise_id)
        assert record["stores"][0]["totalRevenue"] == pytest.approx(0.25)
