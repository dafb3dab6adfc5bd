"""
Catalog business logic.

Scope:
- add movies (title required, `watched` defaults to false)
- sorted/paginated listing and watched-status filtering
- mark-watched and delete with not-found feedback
"""

from __future__ import annotations

import logging
from decimal import Decimal
from uuid import UUID

from core.errors import InvalidInput, NotFound

from . import query, schemas
from .repository import MovieRepository

logger = logging.getLogger(__name__)


def _to_movie_response(row: dict) -> schemas.MovieResponse:
    rating = row.get("rating")
    return schemas.MovieResponse(
        id=UUID(str(row["id"])),
        title=str(row["title"]),
        genre=row.get("genre"),
        release_year=row.get("release_year"),
        rating=Decimal(rating) if rating is not None else None,
        watched=bool(row.get("watched", False)),
    )


async def add_movie(payload: schemas.MovieCreate, *, movies: MovieRepository) -> UUID:
    title = (payload.title or "").strip()
    if not title:
        raise InvalidInput("Title is required.")

    genre = (payload.genre or "").strip() or None
    row = await movies.insert_movie(
        title=title,
        genre=genre,
        release_year=payload.release_year,
        rating=payload.rating,
        watched=bool(payload.watched) if payload.watched is not None else False,
    )
    logger.info("movie_added id=%s", row["id"])
    return UUID(str(row["id"]))


async def list_movies(
    *,
    movies: MovieRepository,
    sort_by: str | None = None,
    order: str | None = None,
    page: int | None = None,
    limit: int | None = None,
) -> tuple[list[schemas.MovieResponse], query.PageSpec]:
    sort = query.resolve_sort(sort_by, order)
    page_spec = query.resolve_page(page, limit)
    rows = await movies.list_movies(sort=sort, page=page_spec)
    return [_to_movie_response(row) for row in rows], page_spec


async def list_movies_by_status(watched: bool, *, movies: MovieRepository) -> list[schemas.MovieResponse]:
    rows = await movies.list_movies_by_status(watched)
    return [_to_movie_response(row) for row in rows]


async def mark_watched(movie_id: UUID, watched: bool, *, movies: MovieRepository) -> None:
    if not await movies.set_watched(movie_id, watched):
        raise NotFound("Movie not found.")
    logger.info("movie_marked id=%s watched=%s", movie_id, watched)


async def delete_movie(movie_id: UUID, *, movies: MovieRepository) -> None:
    if not await movies.delete_movie(movie_id):
        raise NotFound("Movie not found.")
    logger.info("movie_deleted id=%s", movie_id)
