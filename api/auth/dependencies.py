"""
Auth dependencies for FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, Request

from core import config
from core.errors import Unauthorized

from . import session
from .repository import SessionRepository, UserRepository
from .session import SessionContext


def get_user_repository(request: Request) -> UserRepository:
    return request.app.state.users


def get_session_repository(request: Request) -> SessionRepository:
    return request.app.state.sessions


async def get_session(
    request: Request,
    sessions: SessionRepository = Depends(get_session_repository),
) -> SessionContext:
    return await session.read(request, sessions)


def require_session(current: SessionContext = Depends(get_session)) -> SessionContext:
    if not current.is_authenticated:
        raise Unauthorized()
    return current


def catalog_access(current: SessionContext = Depends(get_session)) -> SessionContext:
    """
    Catalog routes are open unless CATALOG_REQUIRE_AUTH is set.
    """
    if config.catalog_require_auth() and not current.is_authenticated:
        raise Unauthorized()
    return current
