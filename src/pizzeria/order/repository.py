"""Repository for the Order aggregate."""

from pizzeria.domain import pizzeria
from pizzeria.order.order import Order
from pizzeria.utils.paging import read_all


@pizzeria.repository(part_of=Order)
class OrderRepository:
    def page_for_diner(self, user_id, page: int, size: int) -> tuple[list[Order], bool]:
        """One page of a diner's orders, oldest first, and whether more follow."""
        results = (
            self._dao.query.filter(user_id=str(user_id))
            .order_by("id")
            .offset((page - 1) * size)
            .limit(size)
            .all()
        )
        return results.items, results.total > page * size

    def revenue_by_store(self, franchise_ids) -> dict[str, float]:
        if not franchise_ids:
            return {}
        orders = read_all(
            self._dao.query.filter(franchise_id__in=[str(fid) for fid in franchise_ids]).order_by("id")
        )
        revenue: dict[str, float] = {}
        for order in orders:
            key = str(order.store_id)
            revenue[key] = revenue.get(key, 0.0) + order.total()
        return revenue
