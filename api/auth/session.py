"""
Per-request session context.

A session is either anonymous or bound to exactly one user id. The cookie is a
signed token naming a session id (`sid`); the session store decides whether
that id is still live. The only way to bind a user id is `start()` with a
`SessionGrant`, which `service.login` hands out after a successful password
check.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

from fastapi import Request, Response

from core import config

from . import security
from .repository import SessionRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionGrant:
    user_id: UUID
    username: str


@dataclass(frozen=True)
class SessionContext:
    user_id: UUID | None = None
    session_id: str | None = None

    @classmethod
    def anonymous(cls) -> SessionContext:
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


def _decode_cookie(request: Request) -> SessionContext:
    raw = request.cookies.get(config.session_cookie_name())
    if not raw:
        return SessionContext.anonymous()

    try:
        payload = security.decode_session_token(raw)
        user_id = UUID(str(payload["sub"]))
    except (security.AuthSecurityError, KeyError, ValueError) as exc:
        logger.info("session_rejected reason=%s", exc)
        return SessionContext.anonymous()

    return SessionContext(user_id=user_id, session_id=str(payload["sid"]))


async def read(request: Request, sessions: SessionRepository) -> SessionContext:
    """
    Resolve the session cookie. Missing, expired, tampered or revoked sessions
    are anonymous.
    """
    current = _decode_cookie(request)
    if not current.is_authenticated:
        return current

    row = await sessions.get_active_session(current.session_id)
    if row is None or UUID(str(row["user_id"])) != current.user_id:
        logger.info("session_rejected reason=inactive sid=%s", current.session_id)
        return SessionContext.anonymous()
    return current


async def start(response: Response, grant: SessionGrant, sessions: SessionRepository) -> SessionContext:
    """
    Record a fresh session id for the granted user and set the cookie.
    """
    session_id = security.build_session_id()
    expires_at = datetime.now(timezone.utc) + timedelta(days=config.session_expire_days())
    await sessions.create_session(session_id=session_id, user_id=grant.user_id, expires_at=expires_at)

    token = security.build_session_token(user_id=str(grant.user_id), session_id=session_id)
    response.set_cookie(
        key=config.session_cookie_name(),
        value=token,
        max_age=config.session_expire_days() * 24 * 60 * 60,
        httponly=True,
        secure=config.session_cookie_secure(),
        samesite="lax",
    )
    return SessionContext(user_id=grant.user_id, session_id=session_id)


async def end(request: Request, response: Response, sessions: SessionRepository) -> SessionContext:
    """
    Revoke the cookie's session id (if any) and clear the cookie. Always succeeds.
    """
    current = _decode_cookie(request)
    if current.session_id is not None:
        revoked = await sessions.revoke_session(current.session_id)
        logger.info("session_ended sid=%s revoked=%s", current.session_id, revoked)

    response.delete_cookie(
        key=config.session_cookie_name(),
        httponly=True,
        secure=config.session_cookie_secure(),
        samesite="lax",
    )
    return SessionContext.anonymous()
