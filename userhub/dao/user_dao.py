"""UserDAO — users table operations."""

from sqlalchemy.ext.asyncio import AsyncSession

from userhub.dao.base import BaseDAO
from userhub.models.user import User


class UserDAO(BaseDAO[User]):
    model = User
    hidden_columns = frozenset({"password_hash"})

    async def get_by_username(self, session: AsyncSession, username: str) -> User | None:
        """Look up a user by exact username."""
        return await self.get_by_field(session, username=username)

    async def username_taken(
        self, session: AsyncSession, username: str, *, exclude_id: int | None = None
    ) -> bool:
        """True if another row already owns *username*."""
        user = await self.get_by_username(session, username)
        if user is None:
            return False
        return exclude_id is None or user.id != exclude_id
