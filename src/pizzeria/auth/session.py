"""Session lifecycle: issuing, logging in and revoking tokens."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from pizzeria.auth.token import AuthToken, sign_token, token_signature
from pizzeria.domain import pizzeria
from pizzeria.errors import NotFound
from pizzeria.user.passwords import verify_password
from pizzeria.user.user import User


@pizzeria.command(part_of="AuthToken")
class IssueToken:
    """Open a new session for an already-authenticated user."""

    user_id: Identifier(required=True)


@pizzeria.command(part_of="AuthToken")
class LogIn:
    """Check credentials and open a new session."""

    email: String(required=True, max_length=254)
    password: String(required=True, max_length=128)


@pizzeria.command(part_of="AuthToken")
class RevokeToken:
    """Close a session. The token never resolves again."""

    token: Text(required=True)


def _open_session(user: User) -> str:
    token = sign_token(user.to_summary())
    current_domain.repository_for(AuthToken).add(AuthToken(signature=token_signature(token), user_id=user.id))
    return token


@pizzeria.command_handler(part_of=AuthToken)
class SessionHandler:
    @handle(IssueToken)
    def issue_token(self, command):
        user = current_domain.repository_for(User).get(command.user_id)
        return _open_session(user)

    @handle(LogIn)
    def log_in(self, command):
        user = current_domain.repository_for(User).find_by_email(command.email)
        if user is None or not verify_password(user.password_hash, command.password):
            raise NotFound("unknown user")
        return _open_session(user)

    @handle(RevokeToken)
    def revoke_token(self, command):
        repo = current_domain.repository_for(AuthToken)
        auth_token = repo.find(command.token)
        if auth_token is not None:
            repo.remove(auth_token)
