"""
Auth business logic.
"""

from __future__ import annotations

import logging
from uuid import UUID

from core import config
from core.errors import DuplicateUsername, InvalidCredentials, InvalidInput, Unauthorized

from . import schemas, security
from .repository import UserRepository
from .session import SessionContext, SessionGrant

logger = logging.getLogger(__name__)


def _to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=UUID(str(user_row["id"])),
        username=str(user_row["username"]),
    )


def _validate_registration(payload: schemas.RegisterRequest) -> None:
    if not payload.username.strip():
        raise InvalidInput("Username is required.")
    if not payload.password:
        raise InvalidInput("Password is required.")

    min_length = config.password_min_length()
    if len(payload.password) < min_length:
        raise InvalidInput(f"Password must be at least {min_length} characters.")


async def register(
    payload: schemas.RegisterRequest,
    *,
    users: UserRepository,
) -> schemas.UserResponse:
    _validate_registration(payload)

    password_hash = security.hash_password(payload.password)
    user_row = await users.create_user(username=payload.username, password_hash=password_hash)
    if user_row is None:
        raise DuplicateUsername()

    logger.info("user_registered user_id=%s", user_row["id"])
    return _to_user_response(user_row)


async def login(
    payload: schemas.LoginRequest,
    *,
    users: UserRepository,
) -> SessionGrant:
    user_row = await users.get_user_by_username(payload.username)
    if user_row is None:
        security.burn_password_check(payload.password)
        logger.info("login_failed reason=unknown_user")
        raise InvalidCredentials()

    is_valid = security.verify_password(payload.password, str(user_row.get("password_hash") or ""))
    if not is_valid:
        logger.info("login_failed reason=bad_password user_id=%s", user_row["id"])
        raise InvalidCredentials()

    logger.info("login_succeeded user_id=%s", user_row["id"])
    return SessionGrant(user_id=UUID(str(user_row["id"])), username=str(user_row["username"]))


async def current_user(
    session: SessionContext,
    *,
    users: UserRepository,
) -> schemas.UserResponse:
    if not session.is_authenticated:
        raise Unauthorized()

    user_row = await users.get_user_by_id(session.user_id)
    if user_row is None:
        raise Unauthorized("Session user no longer exists.")
    return _to_user_response(user_row)
