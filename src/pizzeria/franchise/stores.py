"""Store management: commands and handlers."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from pizzeria.domain import pizzeria
from pizzeria.errors import NotFound
from pizzeria.franchise.franchise import Franchise, store_record


@pizzeria.command(part_of="Franchise")
class CreateStore:
    franchise_id: Identifier(required=True)
    name: String(required=True, max_length=100)


@pizzeria.command(part_of="Franchise")
class DeleteStore:
    franchise_id: Identifier(required=True)
    store_id: Identifier(required=True)


def _load_franchise(franchise_id) -> Franchise:
    try:
        return current_domain.repository_for(Franchise).get(franchise_id)
    except ObjectNotFoundError:
        raise NotFound("unknown franchise")


@pizzeria.command_handler(part_of=Franchise)
class ManageStoreHandler:
    @handle(CreateStore)
    def create_store(self, command):
        franchise = _load_franchise(command.franchise_id)
        store = franchise.open_store(command.name)
        current_domain.repository_for(Franchise).add(franchise)
        return store_record(franchise, store)

    @handle(DeleteStore)
    def delete_store(self, command):
        franchise = _load_franchise(command.franchise_id)
        store = franchise.store(command.store_id)
        if store is None:
            raise NotFound("unknown store")

        franchise.close_store(store)
        current_domain.repository_for(Franchise).add(franchise)
