"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from . import dependencies, schemas, service, session
from .repository import SessionRepository, UserRepository
from .session import SessionContext

router = APIRouter(prefix="/auth")


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: schemas.RegisterRequest,
    users: UserRepository = Depends(dependencies.get_user_repository),
) -> schemas.UserResponse:
    return await service.register(payload, users=users)


@router.post("/login")
async def login(
    payload: schemas.LoginRequest,
    response: Response,
    users: UserRepository = Depends(dependencies.get_user_repository),
    sessions: SessionRepository = Depends(dependencies.get_session_repository),
) -> schemas.LoginResponse:
    grant = await service.login(payload, users=users)
    await session.start(response, grant, sessions)
    return schemas.LoginResponse(user=schemas.UserResponse(id=grant.user_id, username=grant.username))


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    sessions: SessionRepository = Depends(dependencies.get_session_repository),
) -> dict:
    await session.end(request, response, sessions)
    return {"ok": True}


@router.get("/me")
async def me(
    current: SessionContext = Depends(dependencies.require_session),
    users: UserRepository = Depends(dependencies.get_user_repository),
) -> schemas.UserResponse:
    return await service.current_user(current, users=users)
