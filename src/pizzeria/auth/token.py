"""Session tokens and the AuthToken aggregate that backs the token store.

Tokens handed to clients are HS256 JWTs carrying the user summary. The store
keeps only the signature segment, keyed as the aggregate identifier, so a
token is live exactly as long as its signature is present.
"""

from datetime import UTC, datetime
from uuid import uuid4

import jwt
from protean.fields import DateTime, Identifier, String

from pizzeria.config import get_settings
from pizzeria.domain import pizzeria

_ALGORITHM = "HS256"


def sign_token(claims: dict) -> str:
    """Sign ``claims`` into a compact JWT.

    A random ``jti`` keeps tokens distinct across repeated logins.
    """
    payload = {**claims, "jti": uuid4().hex, "iat": int(datetime.now(UTC).timestamp())}
    return jwt.encode(payload, get_settings().jwt_secret, algorithm=_ALGORITHM)


def decode_token(token: str) -> dict:
    """Verify the signature and return the claims.

    Raises ``jwt.InvalidTokenError`` for anything that is not a token signed
    with the configured secret.
    """
    return jwt.decode(token, get_settings().jwt_secret, algorithms=[_ALGORITHM])


def token_signature(token: str) -> str:
    parts = token.split(".")
    return parts[2] if len(parts) == 3 else ""


@pizzeria.aggregate
class AuthToken:
    """A live session for one user, keyed by the token's signature."""

    signature: String(identifier=True, max_length=128)
    user_id: Identifier(required=True)
    issued_at: DateTime(default=datetime.now)


@pizzeria.repository(part_of=AuthToken)
class AuthTokenRepository:
    def find(self, token: str) -> AuthToken | None:
        signature = token_signature(token)
        if not signature:
            return None
        return self._dao.query.filter(signature=signature).all().first

    def remove(self, auth_token: AuthToken) -> None:
        self._dao.delete(auth_token)
