"""Shared fixtures for userhub tests.

DAO tests run against an in-memory SQLite database through aiosqlite;
everything above the DAO layer is tested with mocks.
"""

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import userhub.models  # noqa: F401
from userhub.core.database import Base

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database per test."""
    eng = create_async_engine(TEST_DB_URL, poolclass=StaticPool)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session(engine):
    """Provide a transactional session that rolls back after each test."""
    async with async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)() as sess:
        async with sess.begin():
            yield sess
            await sess.rollback()
