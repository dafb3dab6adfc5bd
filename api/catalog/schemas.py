"""
Pydantic schemas for catalog endpoints.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

MIN_RELEASE_YEAR = 1800
MAX_RELEASE_YEAR = 2200


class MovieCreate(BaseModel):
    # Emptiness is checked by the service so it maps to 400, not 422.
    title: str = Field(..., max_length=500)
    genre: str | None = Field(default=None, max_length=200)
    release_year: int | None = Field(default=None, ge=MIN_RELEASE_YEAR, le=MAX_RELEASE_YEAR)
    rating: Decimal | None = None
    watched: bool | None = None


class MovieResponse(BaseModel):
    id: UUID
    title: str
    genre: str | None = None
    release_year: int | None = None
    rating: Decimal | None = None
    watched: bool = False


class WatchRequest(BaseModel):
    watched: bool = True
