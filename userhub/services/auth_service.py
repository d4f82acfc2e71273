"""AuthService — resolves Bearer access tokens into the current user.

Tokens are issued by an external identity provider; this service only
verifies them.
"""

import os

from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from userhub.dao.user_dao import UserDAO
from userhub.models.user import User
from userhub.services import AuthenticationError

# ---------------------------------------------------------------------------
# JWT configuration
# ---------------------------------------------------------------------------

_ALGORITHM = "HS256"

_ENV_JWT_SECRET = "USERHUB_JWT_SECRET"


def _get_secret() -> str:
    """Read JWT secret from environment. Raises if not set."""
    secret = os.environ.get(_ENV_JWT_SECRET)
    if not secret:
        raise RuntimeError(f"{_ENV_JWT_SECRET} environment variable is required")
    return secret


# ---------------------------------------------------------------------------
# AuthService
# ---------------------------------------------------------------------------


class AuthService:
    """Stateless token verification."""

    def __init__(self, user_dao: UserDAO) -> None:
        self._user_dao = user_dao

    async def get_current_user(self, session: AsyncSession, token: str) -> User:
        """Decode an access token and return the corresponding user.

        Expects ``sub`` to hold the numeric user id and ``type`` to be
        ``"access"``.

        Raises :class:`AuthenticationError` on invalid token or unknown user.
        """
        secret = _get_secret()
        try:
            payload = jwt.decode(token, secret, algorithms=[_ALGORITHM])
        except JWTError:
            raise AuthenticationError("invalid access token")

        if payload.get("type") != "access":
            raise AuthenticationError("invalid token type")

        try:
            user_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("invalid token payload")

        user = await self._user_dao.get_by_id(session, user_id)
        if user is None:
            raise AuthenticationError("user not found")

        return user
