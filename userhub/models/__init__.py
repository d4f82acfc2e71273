"""SQLAlchemy ORM models — one file per table."""

from userhub.models.user import User

__all__ = [
    "User",
]
