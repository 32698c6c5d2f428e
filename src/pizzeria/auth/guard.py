"""Authorization guard.

Turns a bearer token into a :class:`Caller` and answers role questions about
it. Roles are a closed set of variants; every check matches them
exhaustively so a new variant cannot slip through unhandled.
"""

from dataclasses import dataclass, field

import jwt
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from pizzeria.auth.token import AuthToken, decode_token
from pizzeria.errors import Forbidden, Unauthenticated
from pizzeria.user.user import RoleName, User


@dataclass(frozen=True)
class Diner:
    pass


@dataclass(frozen=True)
class Admin:
    pass


@dataclass(frozen=True)
class Franchisee:
    franchise_id: str


Role = Diner | Admin | Franchisee


def role_from_assignment(assignment) -> Role:
    if assignment.role == RoleName.DINER.value:
        return Diner()
    if assignment.role == RoleName.ADMIN.value:
        return Admin()
    if assignment.role == RoleName.FRANCHISEE.value:
        return Franchisee(franchise_id=str(assignment.franchise_id))
    raise TypeError(f"Unknown role {assignment.role!r}")


def role_covers_franchise(role: Role, franchise_id: str) -> bool:
    if isinstance(role, Admin):
        return True
    if isinstance(role, Franchisee):
        return role.franchise_id == str(franchise_id)
    if isinstance(role, Diner):
        return False
    raise TypeError(f"Unknown role {role!r}")


@dataclass(frozen=True)
class Caller:
    """The authenticated user behind a request."""

    id: str
    name: str
    email: str
    roles: tuple = field(default_factory=tuple)
    token: str = ""

    @property
    def is_admin(self) -> bool:
        return any(isinstance(role, Admin) for role in self.roles)

    def administers(self, franchise_id) -> bool:
        return any(role_covers_franchise(role, franchise_id) for role in self.roles)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def resolve_caller(authorization: str | None) -> Caller:
    """Resolve an ``Authorization`` header value to a Caller.

    Raises :class:`Unauthenticated` when the token is absent, malformed,
    signed with another secret, revoked, or names a user that no longer
    exists. Roles are read from the directory, not from the token claims.
    """
    token = _bearer_token(authorization)
    if token is None:
        raise Unauthenticated()

    try:
        decode_token(token)
    except jwt.InvalidTokenError:
        raise Unauthenticated()

    auth_token = current_domain.repository_for(AuthToken).find(token)
    if auth_token is None:
        raise Unauthenticated()

    try:
        user = current_domain.repository_for(User).get(auth_token.user_id)
    except ObjectNotFoundError:
        raise Unauthenticated()

    return Caller(
        id=str(user.id),
        name=user.name,
        email=user.email,
        roles=tuple(role_from_assignment(a) for a in user.roles),
        token=token,
    )


def require_admin(caller: Caller, message: str) -> None:
    if not caller.is_admin:
        raise Forbidden(message)


def require_franchise_admin(caller: Caller, franchise_id, message: str) -> None:
    if not caller.administers(franchise_id):
        raise Forbidden(message)


def can_act_for_user(caller: Caller, user_id) -> bool:
    return caller.is_admin or caller.id == str(user_id)
