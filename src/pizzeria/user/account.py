"""User account maintenance: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from pizzeria.domain import pizzeria
from pizzeria.user.passwords import hash_password
from pizzeria.user.user import User


@pizzeria.command(part_of="User")
class UpdateUser:
    """Change any subset of a user's name, email and password."""

    user_id: Identifier(required=True)
    name: String(max_length=100)
    email: String(max_length=254)
    password: String(max_length=128)


@pizzeria.command_handler(part_of=User)
class UpdateUserHandler:
    @handle(UpdateUser)
    def update_user(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        if command.email:
            existing = repo.find_by_email(command.email)
            if existing is not None and str(existing.id) != str(user.id):
                raise ValidationError({"email": ["A user with this email is already registered"]})

        user.update_account(
            name=command.name,
            email=command.email,
            password_hash=hash_password(command.password) if command.password else None,
        )
        repo.add(user)
        return str(user.id)
