"""Generic base DAO — CRUD (ORM) + offset pagination (Core)."""

import math
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from userhub.core.database import Base

ModelT = TypeVar("ModelT", bound=Base)

PAGE_SIZE_MIN = 1
PAGE_SIZE_MAX = 100
PAGE_SIZE_DEFAULT = 20

SORT_DIRECTIONS = ("asc", "desc")


class InvalidSortError(ValueError):
    """Raised when a sort spec names an unknown column or direction."""


@dataclass(frozen=True)
class PageRequest:
    """1-based page number, page size and ``(column, direction)`` sort keys."""

    page_no: int = 1
    page_size: int = PAGE_SIZE_DEFAULT
    sort: tuple[tuple[str, str], ...] = (("id", "asc"),)


@dataclass
class Page(Generic[ModelT]):
    """Offset-paginated result set."""

    content: list[ModelT]
    page_no: int
    page_size: int
    total: int
    total_pages: int = field(init=False)

    def __post_init__(self) -> None:
        self.total_pages = math.ceil(self.total / self.page_size) if self.total else 0


def clamp_page_size(page_size: int) -> int:
    return max(PAGE_SIZE_MIN, min(page_size, PAGE_SIZE_MAX))


class BaseDAO(Generic[ModelT]):
    """Base data-access object. Subclasses set ``model`` class attribute.

    ``hidden_columns`` are never accepted as sort keys.
    """

    model: type[ModelT]
    hidden_columns: frozenset[str] = frozenset()

    # ── ORM methods ──────────────────────────────────────────────────────

    @staticmethod
    def _require_pk(pk: int) -> None:
        """Raise ValueError if *pk* is None."""
        if pk is None:
            raise ValueError("pk must not be None")

    async def get_by_id(self, session: AsyncSession, pk: int) -> ModelT | None:
        self._require_pk(pk)
        return await session.get(self.model, pk)

    async def create(self, session: AsyncSession, **values: Any) -> ModelT:
        obj = self.model(**values)
        session.add(obj)
        await session.flush()
        await session.refresh(obj)
        return obj

    async def update(self, session: AsyncSession, pk: int, **values: Any) -> ModelT | None:
        self._require_pk(pk)
        obj = await session.get(self.model, pk)
        if obj is None:
            return None
        immutable = {"id", "created_at", "updated_at"}
        column_keys = set(self.model.__mapper__.column_attrs.keys())
        for key in values:
            if key in immutable:
                raise AttributeError(f"'{key}' is immutable and cannot be updated")
            if key not in column_keys:
                raise AttributeError(f"{self.model.__name__} has no column '{key}'")
        for key, val in values.items():
            setattr(obj, key, val)
        await session.flush()
        await session.refresh(obj)
        return obj

    async def delete(self, session: AsyncSession, pk: int) -> bool:
        self._require_pk(pk)
        obj = await session.get(self.model, pk)
        if obj is None:
            return False
        await session.delete(obj)
        await session.flush()
        return True

    async def get_by_field(self, session: AsyncSession, **filters: Any) -> ModelT | None:
        """Return the first row matching all *filters* (equality), or None."""
        if not filters:
            raise ValueError("get_by_field() requires at least one filter")
        stmt = select(self.model)
        for key, val in filters.items():
            stmt = stmt.where(getattr(self.model, key) == val)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def list_all(self, session: AsyncSession) -> list[ModelT]:
        """Every row, ordered by primary key."""
        stmt = select(self.model).order_by(self.model.__table__.c.id.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    # ── Core methods ─────────────────────────────────────────────────────

    def _order_clauses(self, sort: tuple[tuple[str, str], ...]) -> list:
        """Translate ``(column, direction)`` pairs into ORDER BY clauses.

        Raises ``InvalidSortError`` for unknown or hidden columns.
        """
        table = self.model.__table__
        clauses = []
        for col_name, direction in sort:
            if col_name in self.hidden_columns or col_name not in table.c:
                raise InvalidSortError(f"cannot sort by {col_name!r}")
            if direction not in SORT_DIRECTIONS:
                raise InvalidSortError(f"invalid sort direction {direction!r}")
            col = table.c[col_name]
            clauses.append(col.desc() if direction == "desc" else col.asc())
        # Stable tiebreaker so pages never overlap
        if not any(name == "id" for name, _ in sort):
            clauses.append(table.c.id.asc())
        return clauses

    async def list_offset(
        self,
        session: AsyncSession,
        page_request: PageRequest,
        query: Select | None = None,
    ) -> Page[ModelT]:
        """Apply offset pagination and ordering to *query*.

        Callers should NOT add their own ORDER BY / LIMIT.

        Raises ``InvalidSortError`` if the sort spec is invalid.
        """
        if query is None:
            query = select(self.model)
        page_size = clamp_page_size(page_request.page_size)
        page_no = max(page_request.page_no, 1)
        order = self._order_clauses(page_request.sort)

        total = await self.count(session, query)

        query = query.order_by(*order).offset((page_no - 1) * page_size).limit(page_size)
        result = await session.execute(query)
        rows = list(result.scalars().all())

        return Page(content=rows, page_no=page_no, page_size=page_size, total=total)

    async def count(self, session: AsyncSession, query: Select | None = None) -> int:
        """Return the row count for *query*, or total rows if query is None."""
        if query is None:
            query = select(func.count()).select_from(self.model.__table__)
        else:
            query = select(func.count()).select_from(query.subquery())

        result = await session.execute(query)
        return result.scalar_one()
