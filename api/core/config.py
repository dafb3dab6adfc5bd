"""
Environment-driven settings.

Every setting is read through a small accessor so tests can change the
environment between app startups. A local `.env` file is loaded once at import.
"""

from __future__ import annotations

import logging
import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

STORE_BACKENDS = ("postgres", "memory")


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    return default


def store_backend() -> str:
    backend = _env_str("STORE_BACKEND", "postgres").lower()
    if backend not in STORE_BACKENDS:
        raise RuntimeError(f"STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)}, got {backend!r}.")
    return backend


def db_pool_min_size() -> int:
    return max(1, _env_int("DB_POOL_MIN_SIZE", 1))


def db_pool_max_size() -> int:
    return max(db_pool_min_size(), _env_int("DB_POOL_MAX_SIZE", 5))


def db_command_timeout_s() -> float:
    return float(max(1, _env_int("DB_COMMAND_TIMEOUT_S", 30)))


@lru_cache(maxsize=1)
def _generated_session_secret() -> str:
    logger.warning("session_secret_generated reason=SESSION_SECRET unset; sessions will not survive a restart")
    return secrets.token_urlsafe(32)


def session_secret() -> str:
    return os.environ.get("SESSION_SECRET", "").strip() or _generated_session_secret()


def session_cookie_name() -> str:
    return _env_str("SESSION_COOKIE_NAME", "session")


def session_cookie_secure() -> bool:
    return _env_bool("SESSION_COOKIE_SECURE", False)


def session_expire_days() -> int:
    return max(1, _env_int("SESSION_EXPIRE_DAYS", 7))


def bcrypt_rounds() -> int:
    # bcrypt accepts 4..31.
    return min(31, max(4, _env_int("BCRYPT_ROUNDS", 12)))


def password_min_length() -> int:
    return max(1, _env_int("PASSWORD_MIN_LENGTH", 8))


def default_page_size() -> int:
    return max(1, _env_int("DEFAULT_PAGE_SIZE", 10))


def max_page_size() -> int:
    return max(default_page_size(), _env_int("MAX_PAGE_SIZE", 100))


def catalog_require_auth() -> bool:
    return _env_bool("CATALOG_REQUIRE_AUTH", False)


def cors_allowed_origins() -> list[str]:
    raw = os.environ.get(
        "CORS_ALLOWED_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173",
    )
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def api_host() -> str:
    return _env_str("API_HOST", "127.0.0.1")


def api_port() -> int:
    return _env_int("API_PORT", 8080)
