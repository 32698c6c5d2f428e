"""Read-side helpers for franchise listings."""

from protean.utils.globals import current_domain

from pizzeria.auth.guard import Caller, can_act_for_user
from pizzeria.franchise.franchise import Franchise
from pizzeria.order.order import Order


def _revenue_for(franchises) -> dict[str, float]:
    return current_domain.repository_for(Order).revenue_by_store([f.id for f in franchises])


def list_franchises(caller: Caller, name: str | None = None) -> list[dict]:
    """Every franchise, optionally filtered by a case-insensitive name fragment.

    Administrators are only listed for Admin callers.
    """
    franchises = current_domain.repository_for(Franchise).everything()
    if name:
        fragment = name.strip().lower()
        franchises = [f for f in franchises if fragment in f.name.lower()]

    revenue = _revenue_for(franchises)
    return [f.to_record(include_admins=caller.is_admin, revenue_by_store=revenue) for f in franchises]


def user_franchises(caller: Caller, user_id) -> list[dict]:
    """Franchises that ``user_id`` administers, visible to that user and to Admins."""
    if not can_act_for_user(caller, user_id):
        return []

    franchises = [
        f for f in current_domain.repository_for(Franchise).everything() if str(user_id) in f.admin_ids()
    ]
    revenue = _revenue_for(franchises)
    return [f.to_record(include_admins=True, revenue_by_store=revenue) for f in franchises]


def franchise_record(franchise_id) -> dict:
    franchise = current_domain.repository_for(Franchise).get(franchise_id)
    return franchise.to_record(include_admins=True, revenue_by_store=_revenue_for([franchise]))
