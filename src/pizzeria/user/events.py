"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from pizzeria.domain import pizzeria


@pizzeria.event(part_of="User")
class UserRegistered:
    """A new user account was created."""

    __version__ = 1

    user_id: Identifier(required=True)
    name: String(required=True)
    email: String(required=True)
    roles: String(required=True)
    registered_at: DateTime(required=True)


@pizzeria.event(part_of="User")
class AccountUpdated:
    """A user's name, email or password was changed."""

    __version__ = 1

    user_id: Identifier(required=True)
    changed_fields: String(required=True)
    updated_at: DateTime(required=True)
