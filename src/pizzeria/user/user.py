"""User aggregate with its RoleAssignment entities."""

from datetime import datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, String

from pizzeria.domain import pizzeria
from pizzeria.shared.email import EmailAddress

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class RoleName(Enum):
    """Persisted role tags."""

    DINER = "diner"
    ADMIN = "admin"
    FRANCHISEE = "franchisee"


@pizzeria.entity(part_of="User")
class RoleAssignment:
    """One role held by a user.

    Franchisee assignments name the franchise they administer; the other
    roles are global and carry no franchise.
    """

    role: String(required=True, choices=RoleName)
    franchise_id: Identifier()

    def summary(self) -> dict:
        if self.role == RoleName.FRANCHISEE.value:
            return {"role": self.role, "objectId": str(self.franchise_id)}
        return {"role": self.role}


@pizzeria.aggregate
class User:
    """A person who can sign in: diners, franchise admins and global admins.

    The password is only ever held as an Argon2 hash. Role assignments are
    not mutually exclusive; a diner may also administer one or more
    franchises.
    """

    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    password_hash: String(required=True, max_length=255)
    roles: HasMany(RoleAssignment)
    registered_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def franchisee_roles_name_a_franchise(self):
        for assignment in self.roles:
            if assignment.role == RoleName.FRANCHISEE.value and not assignment.franchise_id:
                raise ValidationError({"roles": ["Franchisee role requires a franchise"]})

    @classmethod
    def register(cls, name, email, password_hash, admin=False):
        from pizzeria.user.events import UserRegistered

        email_vo = EmailAddress.normalised(email)
        now = datetime.now()

        user = cls(
            name=name,
            email=email_vo.address,
            password_hash=password_hash,
            registered_at=now,
            updated_at=now,
        )
        user.add_roles(RoleAssignment(role=RoleName.DINER.value))
        if admin:
            user.add_roles(RoleAssignment(role=RoleName.ADMIN.value))

        user.raise_(
            UserRegistered(
                user_id=user.id,
                name=name,
                email=email_vo.address,
                roles=",".join(a.role for a in user.roles),
                registered_at=now,
            )
        )
        return user

    def update_account(self, name=_UNSET, email=_UNSET, password_hash=_UNSET):
        from pizzeria.user.events import AccountUpdated

        changed = []
        if name is not _UNSET and name is not None:
            self.name = name
            changed.append("name")
        if email is not _UNSET and email is not None:
            self.email = EmailAddress.normalised(email).address
            changed.append("email")
        if password_hash is not _UNSET and password_hash is not None:
            self.password_hash = password_hash
            changed.append("password")

        if not changed:
            return

        self.updated_at = datetime.now()
        self.raise_(
            AccountUpdated(
                user_id=self.id,
                changed_fields=",".join(changed),
                updated_at=self.updated_at,
            )
        )

    def has_role(self, role: RoleName, franchise_id=None) -> bool:
        for assignment in self.roles:
            if assignment.role != role.value:
                continue
            if franchise_id is None or str(assignment.franchise_id) == str(franchise_id):
                return True
        return False

    def grant_franchisee(self, franchise_id):
        if self.has_role(RoleName.FRANCHISEE, franchise_id):
            return
        self.add_roles(RoleAssignment(role=RoleName.FRANCHISEE.value, franchise_id=franchise_id))

    def revoke_franchisee(self, franchise_id):
        for assignment in list(self.roles):
            if assignment.role == RoleName.FRANCHISEE.value and str(assignment.franchise_id) == str(franchise_id):
                self.remove_roles(assignment)

    def franchise_ids(self) -> list[str]:
        return [str(a.franchise_id) for a in self.roles if a.role == RoleName.FRANCHISEE.value]

    def to_summary(self) -> dict:
        """Public view of the user. Never includes the password hash."""
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "roles": [a.summary() for a in self.roles],
        }
