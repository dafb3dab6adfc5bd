"""
Catalog API endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, Request, status

from auth import dependencies as auth_dependencies
from auth.session import SessionContext
from core.errors import InvalidInput

from . import schemas, service
from .repository import MovieRepository

router = APIRouter(prefix="/movies")


def get_movie_repository(request: Request) -> MovieRepository:
    return request.app.state.movies


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_movie(
    payload: schemas.MovieCreate,
    movies: MovieRepository = Depends(get_movie_repository),
    _: SessionContext = Depends(auth_dependencies.catalog_access),
) -> dict:
    movie_id = await service.add_movie(payload, movies=movies)
    return {"id": movie_id}


@router.get("")
async def list_movies(
    sort_by: str | None = Query(default=None, alias="sortBy", max_length=50),
    sort_by_snake: str | None = Query(default=None, alias="sort_by", max_length=50),
    order: str | None = Query(default=None, max_length=10),
    page: int | None = Query(default=None),
    limit: int | None = Query(default=None),
    watched: bool | None = Query(default=None),
    movies: MovieRepository = Depends(get_movie_repository),
    _: SessionContext = Depends(auth_dependencies.catalog_access),
) -> dict:
    """
    List movies. With `watched`, returns every movie with that status instead
    of a sorted page; sorting and paging parameters are rejected alongside it.
    """
    if watched is not None:
        if any(value is not None for value in (sort_by, sort_by_snake, order, page, limit)):
            raise InvalidInput("watched cannot be combined with sortBy, order, page or limit.")
        rows = await service.list_movies_by_status(watched, movies=movies)
        return {"movies": rows, "count": len(rows), "watched": watched}

    rows, page_spec = await service.list_movies(
        movies=movies,
        sort_by=sort_by or sort_by_snake,
        order=order,
        page=page,
        limit=limit,
    )
    return {
        "movies": rows,
        "count": len(rows),
        "page": page_spec.page,
        "limit": page_spec.limit,
    }


@router.put("/{movie_id}/watch")
async def mark_watched(
    movie_id: UUID,
    watched: bool | None = Query(default=None),
    body: schemas.WatchRequest | None = Body(default=None),
    movies: MovieRepository = Depends(get_movie_repository),
    _: SessionContext = Depends(auth_dependencies.catalog_access),
) -> dict:
    # Query parameter wins over the body; neither means "watched".
    if watched is None:
        watched = body.watched if body is not None else True
    await service.mark_watched(movie_id, watched, movies=movies)
    return {"ok": True, "id": movie_id, "watched": watched}


@router.delete("/{movie_id}")
async def delete_movie(
    movie_id: UUID,
    movies: MovieRepository = Depends(get_movie_repository),
    _: SessionContext = Depends(auth_dependencies.catalog_access),
) -> dict:
    await service.delete_movie(movie_id, movies=movies)
    return {"ok": True, "id": movie_id}
