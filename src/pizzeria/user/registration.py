"""User registration: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, String
from protean.utils.globals import current_domain

from pizzeria.domain import pizzeria
from pizzeria.user.passwords import hash_password
from pizzeria.user.user import User


@pizzeria.command(part_of="User")
class RegisterUser:
    """Create a new user account. Every user starts out as a diner."""

    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    password: String(required=True, max_length=128)
    admin: Boolean(default=False)


@pizzeria.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.find_by_email(command.email) is not None:
            raise ValidationError({"email": ["A user with this email is already registered"]})

        user = User.register(
            name=command.name,
            email=command.email,
            password_hash=hash_password(command.password),
            admin=bool(command.admin),
        )
        repo.add(user)
        return str(user.id)
