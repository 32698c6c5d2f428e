"""Repository for the Franchise aggregate."""

from pizzeria.domain import pizzeria
from pizzeria.franchise.franchise import Franchise
from pizzeria.utils.paging import read_all


@pizzeria.repository(part_of=Franchise)
class FranchiseRepository:
    def find_by_name(self, name: str) -> Franchise | None:
        return self._dao.query.filter(name=name.strip()).all().first

    def everything(self) -> list[Franchise]:
        return read_all(self._dao.query.order_by("name"))

    def remove(self, franchise: Franchise) -> None:
        self._dao.delete(franchise)
