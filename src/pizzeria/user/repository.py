"""Repository for the User aggregate."""

from pizzeria.domain import pizzeria
from pizzeria.user.user import User


@pizzeria.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email: str) -> User | None:
        """Find a user by email, ignoring case and surrounding whitespace."""
        results = self._dao.query.filter(email=email.strip().lower()).all()
        return results.first
