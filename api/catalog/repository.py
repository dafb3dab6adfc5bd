"""
Catalog store.

`PostgresMovieRepository` issues one SQL statement per operation, so each
mutation is atomic at the database. `InMemoryMovieRepository` mirrors the same
ordering rules and serializes mutations behind its own lock.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Protocol
from uuid import UUID, uuid4

from core import db

from .query import MOVIE_COLUMNS, PageSpec, SortSpec, list_movies_sql


class MovieRepository(Protocol):
    async def insert_movie(
        self,
        *,
        title: str,
        genre: str | None,
        release_year: int | None,
        rating: Decimal | None,
        watched: bool,
    ) -> dict: ...

    async def list_movies(self, *, sort: SortSpec, page: PageSpec) -> list[dict]: ...

    async def list_movies_by_status(self, watched: bool) -> list[dict]: ...

    async def set_watched(self, movie_id: UUID, watched: bool) -> bool:
        """
        Returns False when no movie has `movie_id`.
        """

    async def delete_movie(self, movie_id: UUID) -> bool:
        """
        Returns False when no movie has `movie_id`.
        """


class PostgresMovieRepository:
    async def insert_movie(
        self,
        *,
        title: str,
        genre: str | None,
        release_year: int | None,
        rating: Decimal | None,
        watched: bool,
    ) -> dict:
        row = await db.fetch_one(
            f"""
            INSERT INTO movies (id, title, genre, release_year, rating, watched)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING {MOVIE_COLUMNS}
            """,
            uuid4(),
            title,
            genre,
            release_year,
            rating,
            watched,
        )
        if row is None:
            raise RuntimeError("Failed to insert movie.")
        return row

    async def list_movies(self, *, sort: SortSpec, page: PageSpec) -> list[dict]:
        return await db.fetch_all(list_movies_sql(sort), page.limit, page.offset)

    async def list_movies_by_status(self, watched: bool) -> list[dict]:
        return await db.fetch_all(
            f"""
            SELECT {MOVIE_COLUMNS}
            FROM movies
            WHERE watched = $1
            ORDER BY title COLLATE "C" ASC, id ASC
            """,
            watched,
        )

    async def set_watched(self, movie_id: UUID, watched: bool) -> bool:
        row = await db.fetch_one(
            """
            UPDATE movies
            SET watched = $1
            WHERE id = $2
            RETURNING id
            """,
            watched,
            movie_id,
        )
        return row is not None

    async def delete_movie(self, movie_id: UUID) -> bool:
        row = await db.fetch_one(
            """
            DELETE FROM movies
            WHERE id = $1
            RETURNING id
            """,
            movie_id,
        )
        return row is not None


def _sorted_rows(rows: list[dict], sort: SortSpec) -> list[dict]:
    # Same order as the SQL: column with NULLS LAST in both directions, then id.
    by_id = sorted(rows, key=lambda row: str(row["id"]))
    present = [row for row in by_id if row[sort.column] is not None]
    missing = [row for row in by_id if row[sort.column] is None]
    present.sort(key=lambda row: row[sort.column], reverse=sort.descending)
    return present + missing


class InMemoryMovieRepository:
    def __init__(self) -> None:
        self._rows: dict[UUID, dict] = {}
        self._lock = asyncio.Lock()

    async def insert_movie(
        self,
        *,
        title: str,
        genre: str | None,
        release_year: int | None,
        rating: Decimal | None,
        watched: bool,
    ) -> dict:
        row = {
            "id": uuid4(),
            "title": title,
            "genre": genre,
            "release_year": release_year,
            "rating": rating,
            "watched": watched,
        }
        async with self._lock:
            self._rows[row["id"]] = row
        return dict(row)

    async def list_movies(self, *, sort: SortSpec, page: PageSpec) -> list[dict]:
        rows = _sorted_rows([dict(row) for row in self._rows.values()], sort)
        return rows[page.offset : page.offset + page.limit]

    async def list_movies_by_status(self, watched: bool) -> list[dict]:
        rows = [dict(row) for row in self._rows.values() if row["watched"] is watched]
        return _sorted_rows(rows, SortSpec(column="title"))

    async def set_watched(self, movie_id: UUID, watched: bool) -> bool:
        async with self._lock:
            row = self._rows.get(movie_id)
            if row is None:
                return False
            row["watched"] = watched
            return True

    async def delete_movie(self, movie_id: UUID) -> bool:
        async with self._lock:
            return self._rows.pop(movie_id, None) is not None
