"""UserService — user CRUD behind the signed endpoint pipeline."""

from __future__ import annotations

import bcrypt
import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from userhub.dao.base import InvalidSortError, Page, PageRequest
from userhub.dao.user_dao import UserDAO
from userhub.models.user import User
from userhub.services import ConflictError, NotFoundError, ValidationError
from userhub.services.params import UserParam

log = structlog.get_logger(__name__)


def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def _actor_id(current_user: User | None) -> int | None:
    return current_user.id if current_user is not None else None


class UserService:
    """Stateless service for user CRUD.

    Expected failures are raised as :class:`ServiceError` subclasses; any
    other exception is left to the handler's unknown-error path.
    """

    def __init__(self, user_dao: UserDAO) -> None:
        self._user_dao = user_dao

    async def create(
        self, session: AsyncSession, param: UserParam, current_user: User | None
    ) -> User:
        """Create a user from ``usr``/``pwd`` and the optional profile fields.

        Raises :class:`ConflictError` if the username is taken.
        """
        if not param.usr or not param.pwd:
            raise ValidationError("usr and pwd are required")
        if await self._user_dao.username_taken(session, param.usr):
            raise ConflictError(f"username {param.usr!r} already exists")

        actor = _actor_id(current_user)
        try:
            user = await self._user_dao.create(
                session,
                username=param.usr,
                name=param.name,
                email=param.email,
                description=param.description,
                password_hash=hash_password(param.pwd),
                created_by=actor,
                last_modified_by=actor,
            )
        except IntegrityError as exc:
            # lost a race with a concurrent insert of the same username
            raise ConflictError(f"username {param.usr!r} already exists") from exc
        log.info("user.created", user_id=user.id, actor=actor)
        return user

    async def get_user_by_usr(self, session: AsyncSession, param: UserParam) -> User:
        """Raises :class:`NotFoundError` if no user has that username."""
        user = await self._user_dao.get_by_username(session, param.usr)
        if user is None:
            raise NotFoundError(f"username {param.usr!r}")
        return user

    async def get_all_users(self, session: AsyncSession) -> list[User]:
        return await self._user_dao.list_all(session)

    async def get_page(self, session: AsyncSession, page_request: PageRequest) -> Page[User]:
        """Raises :class:`ValidationError` for an unusable sort spec."""
        try:
            return await self._user_dao.list_offset(session, page_request)
        except InvalidSortError as exc:
            raise ValidationError(str(exc)) from exc

    async def get_user_by_id(self, session: AsyncSession, param: UserParam) -> User:
        """Raises :class:`NotFoundError` if the id does not exist."""
        return await self._require(session, param.id)

    async def update(
        self, session: AsyncSession, param: UserParam, current_user: User | None
    ) -> User:
        """Apply every non-null field of *param* to the user ``param.id``.

        Raises :class:`NotFoundError` / :class:`ConflictError`.
        """
        user = await self._require(session, param.id)

        values: dict = {"last_modified_by": _actor_id(current_user)}
        if param.usr is not None and param.usr != user.username:
            if await self._user_dao.username_taken(session, param.usr, exclude_id=user.id):
                raise ConflictError(f"username {param.usr!r} already exists")
            values["username"] = param.usr
        if param.pwd is not None:
            values["password_hash"] = hash_password(param.pwd)
        for key in ("name", "email", "description"):
            value = getattr(param, key)
            if value is not None:
                values[key] = value

        try:
            updated = await self._user_dao.update(session, user.id, **values)
        except IntegrityError as exc:
            raise ConflictError(f"username {param.usr!r} already exists") from exc
        log.info("user.updated", user_id=user.id, fields=sorted(values))
        return updated

    async def delete(
        self, session: AsyncSession, param: UserParam, current_user: User | None
    ) -> None:
        """Raises :class:`NotFoundError` if the id does not exist."""
        self._check_id(param.id)
        if not await self._user_dao.delete(session, param.id):
            raise NotFoundError(f"id {param.id}")
        log.info("user.deleted", user_id=param.id, actor=_actor_id(current_user))

    # -- helpers -----------------------------------------------------------

    @staticmethod
    def _check_id(user_id: int | None) -> None:
        if user_id is None:
            raise ValidationError("id must not be blank")

    async def _require(self, session: AsyncSession, user_id: int | None) -> User:
        self._check_id(user_id)
        user = await self._user_dao.get_by_id(session, user_id)
        if user is None:
            raise NotFoundError(f"id {user_id}")
        return user
