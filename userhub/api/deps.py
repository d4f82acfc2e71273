"""Dependency injection — session, auth, validator and service singletons."""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from userhub.api.validation import RequestValidator
from userhub.core.database import make_engine
from userhub.core.signing import SignVerifier
from userhub.dao.user_dao import UserDAO
from userhub.models.user import User
from userhub.services.auth_service import AuthService
from userhub.services.user_service import UserService

# ---------------------------------------------------------------------------
# DAO / service singletons
# ---------------------------------------------------------------------------
_user_dao = UserDAO()

_auth_service = AuthService(_user_dao)
_user_service = UserService(_user_dao)
_validator = RequestValidator(SignVerifier())

# ---------------------------------------------------------------------------
# Engine / session factory (initialised by app lifespan)
# ---------------------------------------------------------------------------
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_session_factory(database_url: str | None = None) -> async_sessionmaker[AsyncSession]:
    """Create the async engine and session factory. Called once at startup."""
    global _engine, _session_factory  # noqa: PLW0603
    _engine = make_engine(database_url)
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _session_factory


async def dispose_engine() -> None:
    """Dispose the async engine, closing all pooled connections."""
    global _engine  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
        _engine = None


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a per-request session; commit on success, roll back on error.

    Handlers that turn a failure into an envelope roll back themselves,
    after which the commit here is a no-op.
    """
    if _session_factory is None:
        raise RuntimeError("call init_session_factory() before handling requests")
    async with _session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        await session.commit()


# ---------------------------------------------------------------------------
# Auth dependency
# ---------------------------------------------------------------------------

_bearer = HTTPBearer(auto_error=False)


async def get_optional_user(
    session: AsyncSession = Depends(get_session),
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> User | None:
    """Resolve the Bearer token into a User, or None when no token is sent.

    A token that is present but invalid raises ``AuthenticationError``.
    """
    if credentials is None:
        return None
    return await _auth_service.get_current_user(session, credentials.credentials)


# ---------------------------------------------------------------------------
# Getters (for Depends())
# ---------------------------------------------------------------------------


def get_user_service() -> UserService:
    return _user_service


def get_validator() -> RequestValidator:
    return _validator
