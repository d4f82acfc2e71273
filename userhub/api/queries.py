"""List query variants — decided once from the bound param."""

from __future__ import annotations

from dataclasses import dataclass

from userhub.dao.base import PAGE_SIZE_DEFAULT, PageRequest, clamp_page_size
from userhub.services import ValidationError
from userhub.services.params import UserParam

DEFAULT_SORT = (("id", "asc"),)


@dataclass(frozen=True)
class ByUsername:
    username: str


@dataclass(frozen=True)
class AllUsers:
    pass


@dataclass(frozen=True)
class PageQuery:
    request: PageRequest


ListQuery = ByUsername | AllUsers | PageQuery


def parse_sort(sort_by: str | None) -> tuple[tuple[str, str], ...]:
    """Parse ``"field:dir,field:dir"``; direction defaults to ``asc``.

    Raises :class:`ValidationError` on an empty field or unknown direction.
    Column names are checked later by the DAO.
    """
    if sort_by is None or not sort_by.strip():
        return DEFAULT_SORT
    keys = []
    for part in sort_by.split(","):
        col, _, direction = part.strip().partition(":")
        col = col.strip()
        direction = (direction.strip() or "asc").lower()
        if not col:
            raise ValidationError(f"invalid sortBy {sort_by!r}")
        if direction not in ("asc", "desc"):
            raise ValidationError(f"invalid sort direction {direction!r}")
        keys.append((col, direction))
    return tuple(keys)


def page_request_from(param: UserParam) -> PageRequest:
    """Build a :class:`PageRequest` from ``pageNo``/``pageSize``/``sortBy``."""
    return PageRequest(
        page_no=param.page_no or 1,
        page_size=clamp_page_size(param.page_size or PAGE_SIZE_DEFAULT),
        sort=parse_sort(param.sort_by),
    )


def list_query_from(param: UserParam) -> ListQuery:
    """Priority: username filter > page number > everything."""
    if param.usr and param.usr.strip():
        return ByUsername(param.usr)
    if param.page_no is None:
        return AllUsers()
    return PageQuery(page_request_from(param))
