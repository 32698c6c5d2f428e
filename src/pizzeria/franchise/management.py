"""Franchise management: commands and handlers."""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from pizzeria.domain import pizzeria
from pizzeria.errors import InvalidInput, NotFound
from pizzeria.franchise.franchise import Franchise
from pizzeria.user.user import User


@pizzeria.command(part_of="Franchise")
class CreateFranchise:
    """Create a franchise. ``admin_emails`` is a JSON list of email addresses."""

    name: String(required=True, max_length=100)
    admin_emails: Text()


@pizzeria.command(part_of="Franchise")
class DeleteFranchise:
    franchise_id: Identifier(required=True)


@pizzeria.command_handler(part_of=Franchise)
class ManageFranchiseHandler:
    @handle(CreateFranchise)
    def create_franchise(self, command):
        repo = current_domain.repository_for(Franchise)
        if repo.find_by_name(command.name) is not None:
            raise InvalidInput(f"franchise {command.name.strip()} already exists")

        user_repo = current_domain.repository_for(User)
        admins = []
        for email in json.loads(command.admin_emails) if command.admin_emails else []:
            user = user_repo.find_by_email(email)
            if user is None:
                raise NotFound(f"unknown user for franchise admin {email} provided")
            if all(str(admin.id) != str(user.id) for admin in admins):
                admins.append(user)

        franchise = Franchise.create(name=command.name, admins=admins)
        for user in admins:
            user.grant_franchisee(franchise.id)
            user_repo.add(user)

        repo.add(franchise)
        return str(franchise.id)

    @handle(DeleteFranchise)
    def delete_franchise(self, command):
        repo = current_domain.repository_for(Franchise)
        try:
            franchise = repo.get(command.franchise_id)
        except ObjectNotFoundError:
            return

        # Role stripping, store removal and the delete commit together
        user_repo = current_domain.repository_for(User)
        for user_id in franchise.admin_ids():
            user = user_repo.get(user_id)
            user.revoke_franchisee(franchise.id)
            user_repo.add(user)

        franchise.close()
        repo.add(franchise)
        repo.remove(franchise)
