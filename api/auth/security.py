"""
Auth security helpers: password hashing and session token signing.
"""

from __future__ import annotations

import secrets
import time
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

from core import config
from core.errors import HashingFailure

SESSION_TOKEN_ALGORITHM = "HS256"
SESSION_TOKEN_TYPE = "session"


class AuthSecurityError(RuntimeError):
    pass


def now_epoch_s() -> int:
    return int(time.time())


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise HashingFailure("Password is empty.")
    try:
        return bcrypt.hashpw(password, bcrypt.gensalt(rounds=config.bcrypt_rounds())).decode("utf-8")
    except (ValueError, TypeError) as exc:
        raise HashingFailure(f"bcrypt hashpw failed: {exc!r}") from exc


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    return hash_password(secrets.token_urlsafe(16))


def burn_password_check(plain_password: str) -> None:
    """
    Spend the same bcrypt work as a real check, for unknown usernames.
    """
    verify_password(plain_password or "x", _dummy_password_hash())


def build_session_id() -> str:
    return secrets.token_urlsafe(24)


def build_session_token(*, user_id: str, session_id: str) -> str:
    issued_at = now_epoch_s()
    expires_at = issued_at + (config.session_expire_days() * 24 * 60 * 60)

    payload = {
        "sub": user_id,
        "sid": session_id,
        "type": SESSION_TOKEN_TYPE,
        "iat": issued_at,
        "exp": expires_at,
    }
    return jwt.encode(payload, config.session_secret(), algorithm=SESSION_TOKEN_ALGORITHM)


def decode_session_token(token: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Session token is empty.")

    try:
        payload = jwt.decode(
            raw,
            config.session_secret(),
            algorithms=[SESSION_TOKEN_ALGORITHM],
            options={"require": ["exp", "sub", "sid"]},
        )
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid session token.") from exc

    token_type = str(payload.get("type") or "").strip().lower()
    if token_type != SESSION_TOKEN_TYPE:
        raise AuthSecurityError("Token is not a session token.")

    return payload
