"""Database plumbing — declarative base, timestamp columns, engine factory."""

from __future__ import annotations

import os
from datetime import datetime

from sqlalchemy import DateTime, MetaData, func
from sqlalchemy.ext.asyncio import AsyncAttrs, AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

DEFAULT_DATABASE_URL = "postgresql+asyncpg://localhost/userhub"
_ENV_DATABASE_URL = "USERHUB_DATABASE_URL"

# Deterministic constraint names, so migrations can refer to them
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(AsyncAttrs, DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def _timestamp(**kw) -> Mapped[datetime]:
    return mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False, **kw)


class TimestampMixin:
    """``created_at`` is set once by the database; ``updated_at`` is bumped
    on every UPDATE the ORM flushes."""

    created_at: Mapped[datetime] = _timestamp()
    updated_at: Mapped[datetime] = _timestamp(onupdate=func.now())


def database_url(url: str | None = None) -> str:
    """Explicit *url*, else ``$USERHUB_DATABASE_URL``, else the local default."""
    return url or os.environ.get(_ENV_DATABASE_URL, DEFAULT_DATABASE_URL)


def make_engine(url: str | None = None) -> AsyncEngine:
    resolved = database_url(url)
    if resolved.startswith("sqlite"):
        return create_async_engine(resolved)
    return create_async_engine(resolved, pool_pre_ping=True)


async def create_tables(engine: AsyncEngine) -> list[str]:
    """Create missing tables for every registered model; return table names."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return sorted(Base.metadata.tables)
