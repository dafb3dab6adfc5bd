from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def app_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("SESSION_SECRET", "test-session-secret")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.delenv("CATALOG_REQUIRE_AUTH", raising=False)
    monkeypatch.delenv("PASSWORD_MIN_LENGTH", raising=False)
    monkeypatch.delenv("DEFAULT_PAGE_SIZE", raising=False)
    monkeypatch.delenv("MAX_PAGE_SIZE", raising=False)


@pytest.fixture
def client() -> TestClient:
    from main import app

    with TestClient(app) as test_client:
        yield test_client
