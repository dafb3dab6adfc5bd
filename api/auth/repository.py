"""
Credential and session stores.

`PostgresUserRepository` runs raw SQL through `core.db`;
`InMemoryUserRepository` keeps rows in a dict for local runs and tests.
User rows are plain dicts with `id`, `username`, `password_hash`.
Session rows record which `sid` values are still live, so logout can revoke
a cookie server-side before it expires.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Protocol
from uuid import UUID, uuid4

from core import db


class UserRepository(Protocol):
    async def create_user(self, *, username: str, password_hash: str) -> dict | None:
        """
        Insert a user. Returns None when the username is already taken.
        """

    async def get_user_by_username(self, username: str) -> dict | None: ...

    async def get_user_by_id(self, user_id: UUID) -> dict | None: ...


class PostgresUserRepository:
    async def create_user(self, *, username: str, password_hash: str) -> dict | None:
        # The unique index decides duplicates; no read-then-write window.
        return await db.fetch_one(
            """
            INSERT INTO users (id, username, password_hash)
            VALUES ($1, $2, $3)
            ON CONFLICT (username) DO NOTHING
            RETURNING id, username, password_hash
            """,
            uuid4(),
            username,
            password_hash,
        )

    async def get_user_by_username(self, username: str) -> dict | None:
        return await db.fetch_one(
            """
            SELECT id, username, password_hash
            FROM users
            WHERE username = $1
            """,
            username,
        )

    async def get_user_by_id(self, user_id: UUID) -> dict | None:
        return await db.fetch_one(
            """
            SELECT id, username, password_hash
            FROM users
            WHERE id = $1
            """,
            user_id,
        )


class InMemoryUserRepository:
    def __init__(self) -> None:
        self._rows: dict[UUID, dict] = {}
        self._lock = asyncio.Lock()

    async def create_user(self, *, username: str, password_hash: str) -> dict | None:
        async with self._lock:
            if any(row["username"] == username for row in self._rows.values()):
                return None
            row = {"id": uuid4(), "username": username, "password_hash": password_hash}
            self._rows[row["id"]] = row
            return dict(row)

    async def get_user_by_username(self, username: str) -> dict | None:
        for row in self._rows.values():
            if row["username"] == username:
                return dict(row)
        return None

    async def get_user_by_id(self, user_id: UUID) -> dict | None:
        row = self._rows.get(user_id)
        return dict(row) if row is not None else None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionRepository(Protocol):
    async def create_session(self, *, session_id: str, user_id: UUID, expires_at: datetime) -> None: ...

    async def get_active_session(self, session_id: str) -> dict | None:
        """
        The session row if it exists, is not revoked and has not expired.
        """

    async def revoke_session(self, session_id: str) -> bool: ...


class PostgresSessionRepository:
    async def create_session(self, *, session_id: str, user_id: UUID, expires_at: datetime) -> None:
        row = await db.fetch_one(
            """
            INSERT INTO sessions (id, user_id, expires_at)
            VALUES ($1, $2, $3)
            RETURNING id
            """,
            session_id,
            user_id,
            expires_at,
        )
        if row is None:
            raise RuntimeError("Failed to create session.")

    async def get_active_session(self, session_id: str) -> dict | None:
        return await db.fetch_one(
            """
            SELECT id, user_id, expires_at
            FROM sessions
            WHERE id = $1
              AND revoked_at IS NULL
              AND expires_at > now()
            """,
            session_id,
        )

    async def revoke_session(self, session_id: str) -> bool:
        row = await db.fetch_one(
            """
            UPDATE sessions
            SET revoked_at = now()
            WHERE id = $1
              AND revoked_at IS NULL
            RETURNING id
            """,
            session_id,
        )
        return row is not None


class InMemorySessionRepository:
    def __init__(self) -> None:
        self._rows: dict[str, dict] = {}
        self._lock = asyncio.Lock()

    async def create_session(self, *, session_id: str, user_id: UUID, expires_at: datetime) -> None:
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        async with self._lock:
            self._rows[session_id] = {
                "id": session_id,
                "user_id": user_id,
                "expires_at": expires_at,
                "revoked_at": None,
            }

    async def get_active_session(self, session_id: str) -> dict | None:
        row = self._rows.get(session_id)
        if row is None or row["revoked_at"] is not None or row["expires_at"] <= _utc_now():
            return None
        return {"id": row["id"], "user_id": row["user_id"], "expires_at": row["expires_at"]}

    async def revoke_session(self, session_id: str) -> bool:
        async with self._lock:
            row = self._rows.get(session_id)
            if row is None or row["revoked_at"] is not None:
                return False
            row["revoked_at"] = _utc_now()
            return True
