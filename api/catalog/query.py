"""
Sort and pagination resolution for catalog listings.

Caller-supplied sort keys never reach SQL text directly: they are looked up in
fixed tables below, and only the mapped fragments are spliced in. Everything
else (limit, offset, filter values) is bound as a parameter.
"""

from __future__ import annotations

from dataclasses import dataclass

from core import config
from core.errors import InvalidInput

DEFAULT_SORT_BY = "title"
DEFAULT_ORDER = "asc"

# public sort key -> SQL expression
SORT_COLUMNS: dict[str, str] = {
    "title": 'title COLLATE "C"',
    "genre": 'genre COLLATE "C"',
    "release_year": "release_year",
    "rating": "rating",
    "watched": "watched",
}

SORT_DIRECTIONS: dict[str, str] = {
    "asc": "ASC",
    "desc": "DESC",
}

MOVIE_COLUMNS = "id, title, genre, release_year, rating, watched"


@dataclass(frozen=True)
class SortSpec:
    column: str
    descending: bool = False

    @property
    def order(self) -> str:
        return "desc" if self.descending else "asc"


@dataclass(frozen=True)
class PageSpec:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def resolve_sort(sort_by: str | None, order: str | None) -> SortSpec:
    column = (sort_by or "").strip().lower() or DEFAULT_SORT_BY
    if column not in SORT_COLUMNS:
        allowed = ", ".join(SORT_COLUMNS)
        raise InvalidInput(f"sortBy must be one of: {allowed}.")

    direction = (order or "").strip().lower() or DEFAULT_ORDER
    if direction not in SORT_DIRECTIONS:
        raise InvalidInput("order must be 'asc' or 'desc'.")

    return SortSpec(column=column, descending=direction == "desc")


def resolve_page(page: int | None, limit: int | None) -> PageSpec:
    page = 1 if page is None else page
    limit = config.default_page_size() if limit is None else limit

    if page < 1:
        raise InvalidInput("page must be 1 or greater.")
    max_limit = config.max_page_size()
    if limit < 1 or limit > max_limit:
        raise InvalidInput(f"limit must be between 1 and {max_limit}.")

    return PageSpec(page=page, limit=limit)


def order_by_clause(sort: SortSpec) -> str:
    expression = SORT_COLUMNS[sort.column]
    direction = SORT_DIRECTIONS[sort.order]
    return f"ORDER BY {expression} {direction} NULLS LAST, id ASC"


def list_movies_sql(sort: SortSpec) -> str:
    """
    Page query; binds $1 = limit, $2 = offset.
    """
    return f"SELECT {MOVIE_COLUMNS} FROM movies {order_by_clause(sort)} LIMIT $1 OFFSET $2"
