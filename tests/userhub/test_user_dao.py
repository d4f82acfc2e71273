"""Tests for UserDAO / BaseDAO against SQLite."""

import pytest

from userhub.dao.base import InvalidSortError, PageRequest
from userhub.dao.user_dao import UserDAO


@pytest.fixture
def dao():
    return UserDAO()


async def _seed(dao, session, *names):
    return [
        await dao.create(session, username=name, password_hash="h", name=name.title())
        for name in names
    ]


# ── get_by_username ──────────────────────────────────────────────────────


class TestGetByUsername:
    async def test_found(self, dao, session):
        await dao.create(session, username="alice", email="alice@example.com", password_hash="h")
        user = await dao.get_by_username(session, "alice")
        assert user is not None
        assert user.email == "alice@example.com"
        assert user.id is not None
        assert user.created_at is not None

    async def test_not_found(self, dao, session):
        assert await dao.get_by_username(session, "ghost") is None

    async def test_case_sensitive(self, dao, session):
        await dao.create(session, username="alice", password_hash="h")
        assert await dao.get_by_username(session, "Alice") is None


class TestUsernameTaken:
    async def test_taken(self, dao, session):
        await _seed(dao, session, "alice")
        assert await dao.username_taken(session, "alice")
        assert not await dao.username_taken(session, "bob")

    async def test_excluding_owner(self, dao, session):
        (alice,) = await _seed(dao, session, "alice")
        assert not await dao.username_taken(session, "alice", exclude_id=alice.id)
        assert await dao.username_taken(session, "alice", exclude_id=alice.id + 1)


# ── CRUD ─────────────────────────────────────────────────────────────────


class TestCrud:
    async def test_ids_autoincrement(self, dao, session):
        a, b = await _seed(dao, session, "alice", "bob")
        assert b.id > a.id

    async def test_update(self, dao, session):
        (alice,) = await _seed(dao, session, "alice")
        updated = await dao.update(session, alice.id, description="hello", last_modified_by=7)
        assert updated.description == "hello"
        assert updated.last_modified_by == 7

    async def test_update_missing(self, dao, session):
        assert await dao.update(session, 999, name="x") is None

    async def test_update_immutable(self, dao, session):
        (alice,) = await _seed(dao, session, "alice")
        with pytest.raises(AttributeError, match="immutable"):
            await dao.update(session, alice.id, id=5)

    async def test_update_unknown_column(self, dao, session):
        (alice,) = await _seed(dao, session, "alice")
        with pytest.raises(AttributeError, match="no column"):
            await dao.update(session, alice.id, nickname="al")

    async def test_delete(self, dao, session):
        (alice,) = await _seed(dao, session, "alice")
        assert await dao.delete(session, alice.id) is True
        assert await dao.get_by_id(session, alice.id) is None
        assert await dao.delete(session, alice.id) is False

    async def test_require_pk(self, dao, session):
        with pytest.raises(ValueError, match="pk"):
            await dao.get_by_id(session, None)

    async def test_get_by_field_requires_filter(self, dao, session):
        with pytest.raises(ValueError):
            await dao.get_by_field(session)


# ── listing ──────────────────────────────────────────────────────────────


class TestListing:
    async def test_list_all_ordered_by_id(self, dao, session):
        await _seed(dao, session, "carol", "alice", "bob")
        users = await dao.list_all(session)
        assert [u.username for u in users] == ["carol", "alice", "bob"]

    async def test_count(self, dao, session):
        await _seed(dao, session, "alice", "bob")
        assert await dao.count(session) == 2

    async def test_first_page(self, dao, session):
        await _seed(dao, session, "a1", "a2", "a3", "a4", "a5")
        page = await dao.list_offset(session, PageRequest(page_no=1, page_size=2))
        assert [u.username for u in page.content] == ["a1", "a2"]
        assert page.total == 5
        assert page.total_pages == 3

    async def test_last_page(self, dao, session):
        await _seed(dao, session, "a1", "a2", "a3", "a4", "a5")
        page = await dao.list_offset(session, PageRequest(page_no=3, page_size=2))
        assert [u.username for u in page.content] == ["a5"]

    async def test_past_the_end(self, dao, session):
        await _seed(dao, session, "a1")
        page = await dao.list_offset(session, PageRequest(page_no=9, page_size=2))
        assert page.content == []
        assert page.total == 1

    async def test_sort_desc(self, dao, session):
        await _seed(dao, session, "bob", "alice", "carol")
        page = await dao.list_offset(
            session, PageRequest(page_no=1, page_size=10, sort=(("username", "desc"),))
        )
        assert [u.username for u in page.content] == ["carol", "bob", "alice"]

    async def test_page_size_clamped(self, dao, session):
        await _seed(dao, session, "alice")
        page = await dao.list_offset(session, PageRequest(page_no=1, page_size=1000))
        assert page.page_size == 100

    async def test_empty_table(self, dao, session):
        page = await dao.list_offset(session, PageRequest())
        assert page.total == 0
        assert page.total_pages == 0

    @pytest.mark.parametrize(
        "sort",
        [
            (("password_hash", "asc"),),
            (("nope", "asc"),),
            (("id", "sideways"),),
        ],
    )
    async def test_invalid_sort(self, dao, session, sort):
        with pytest.raises(InvalidSortError):
            await dao.list_offset(session, PageRequest(sort=sort))
