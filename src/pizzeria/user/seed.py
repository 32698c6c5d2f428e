"""Bootstrap of the first administrator account."""

from protean.utils.globals import current_domain

from pizzeria.user.registration import RegisterUser
from pizzeria.user.user import User
from pizzeria.utils.logging import get_logger

logger = get_logger(__name__)


def ensure_admin(name: str, email: str, password: str) -> str:
    """Register an Admin with ``email`` unless a user with that email exists."""
    existing = current_domain.repository_for(User).find_by_email(email)
    if existing is not None:
        return str(existing.id)

    user_id = current_domain.process(
        RegisterUser(name=name, email=email, password=password, admin=True),
        asynchronous=False,
    )
    logger.info("admin_seeded", user_id=user_id, email=email)
    return user_id
