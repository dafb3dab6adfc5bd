from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

from core.errors import StoreUnavailable


def _register_and_login(client, username="ada", password="analytical"):
    assert client.post("/auth/register", json={"username": username, "password": password}).status_code == 201
    resp = client.post("/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200
    return resp


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_add_and_list_movie(client):
    resp = client.post(
        "/movies",
        json={"title": "Heat", "genre": "Crime", "release_year": 1995, "rating": "8.3"},
    )
    assert resp.status_code == 201
    movie_id = resp.json()["id"]

    body = client.get("/movies").json()
    assert body["count"] == 1
    assert body["page"] == 1
    assert body["limit"] == 10
    movie = body["movies"][0]
    assert movie["id"] == movie_id
    assert movie["title"] == "Heat"
    assert movie["watched"] is False
    assert Decimal(str(movie["rating"])) == Decimal("8.3")


def test_add_empty_title_is_bad_request(client):
    resp = client.post("/movies", json={"title": ""})
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Title is required."}
    assert client.get("/movies").json()["count"] == 0


def test_list_sorting_and_pagination_query_params(client):
    for title in ["Brazil", "Alien", "Casablanca"]:
        client.post("/movies", json={"title": title})

    body = client.get("/movies", params={"sortBy": "title", "order": "desc", "page": 2, "limit": 1}).json()
    assert [m["title"] for m in body["movies"]] == ["Brazil"]

    body = client.get("/movies", params={"sort_by": "title", "page": 100, "limit": 10}).json()
    assert body["movies"] == []


def test_list_rejects_unknown_sort_key(client):
    resp = client.get("/movies", params={"sortBy": "title; DROP TABLE movies"})
    assert resp.status_code == 400


def test_list_rejects_page_zero(client):
    assert client.get("/movies", params={"page": 0}).status_code == 400


def test_watch_filter_and_mark_watched(client):
    first = client.post("/movies", json={"title": "Ran"}).json()["id"]
    client.post("/movies", json={"title": "Ikiru"})

    resp = client.put(f"/movies/{first}/watch", params={"watched": "true"})
    assert resp.status_code == 200
    assert resp.json()["watched"] is True

    watched = client.get("/movies", params={"watched": "true"}).json()
    assert [m["id"] for m in watched["movies"]] == [first]

    resp = client.put(f"/movies/{first}/watch", json={"watched": False})
    assert resp.status_code == 200
    assert client.get("/movies", params={"watched": "true"}).json()["count"] == 0


def test_mark_watched_defaults_to_true(client):
    movie_id = client.post("/movies", json={"title": "Ran"}).json()["id"]
    assert client.put(f"/movies/{movie_id}/watch").json()["watched"] is True


def test_mark_watched_unknown_movie_is_404(client):
    assert client.put(f"/movies/{uuid4()}/watch", params={"watched": "true"}).status_code == 404


def test_delete_then_delete_again(client):
    movie_id = client.post("/movies", json={"title": "Jaws"}).json()["id"]
    assert client.delete(f"/movies/{movie_id}").status_code == 200
    assert client.delete(f"/movies/{movie_id}").status_code == 404


def test_register_login_me_logout(client):
    resp = client.post("/auth/register", json={"username": "ada", "password": "analytical"})
    assert resp.status_code == 201
    assert set(resp.json()) == {"id", "username"}

    resp = client.post("/auth/login", json={"username": "ada", "password": "analytical"})
    assert resp.status_code == 200
    assert "password_hash" not in resp.text
    assert "session" in resp.cookies

    me = client.get("/auth/me")
    assert me.status_code == 200
    assert me.json()["username"] == "ada"

    assert client.post("/auth/logout").json() == {"ok": True}
    assert client.get("/auth/me").status_code == 401


def test_logout_without_session_succeeds(client):
    assert client.post("/auth/logout").status_code == 200


def test_register_duplicate_is_conflict(client):
    client.post("/auth/register", json={"username": "ada", "password": "analytical"})
    resp = client.post("/auth/register", json={"username": "ada", "password": "analytical"})
    assert resp.status_code == 409


def test_login_failures_share_status_and_message(client):
    client.post("/auth/register", json={"username": "ada", "password": "analytical"})
    wrong = client.post("/auth/login", json={"username": "ada", "password": "nope-nope"})
    unknown = client.post("/auth/login", json={"username": "ghost", "password": "nope-nope"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json()


def test_tampered_session_cookie_is_anonymous(client):
    _register_and_login(client)
    token = client.cookies.get("session")
    client.cookies.clear()
    client.cookies.set("session", token + "x")
    assert client.get("/auth/me").status_code == 401


def test_catalog_auth_gate_is_configurable(client, monkeypatch):
    monkeypatch.setenv("CATALOG_REQUIRE_AUTH", "true")
    assert client.get("/movies").status_code == 401
    assert client.post("/movies", json={"title": "Heat"}).status_code == 401

    _register_and_login(client)
    assert client.post("/movies", json={"title": "Heat"}).status_code == 201
    assert client.get("/movies").json()["count"] == 1


class _BrokenMovieRepository:
    async def list_movies(self, *, sort, page):
        raise StoreUnavailable("connection refused to db.internal:5432")

    async def insert_movie(self, **fields):
        raise StoreUnavailable("connection refused to db.internal:5432")


def test_store_failure_is_generic_500(client):
    client.app.state.movies = _BrokenMovieRepository()

    resp = client.get("/movies")
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Storage is temporarily unavailable."}
    assert "db.internal" not in resp.text

    resp = client.post("/movies", json={"title": "Heat"})
    assert resp.status_code == 500
    assert "db.internal" not in resp.text


def test_session_cookie_replayed_after_logout_is_rejected(client):
    _register_and_login(client)
    token = client.cookies.get("session")
    assert client.get("/auth/me").status_code == 200

    assert client.post("/auth/logout").status_code == 200
    client.cookies.clear()
    client.cookies.set("session", token)
    assert client.get("/auth/me").status_code == 401


def test_logout_only_ends_its_own_session(client):
    _register_and_login(client)
    first = client.cookies.get("session")
    client.cookies.clear()
    client.post("/auth/login", json={"username": "ada", "password": "analytical"})
    second = client.cookies.get("session")

    client.cookies.clear()
    client.cookies.set("session", first)
    client.post("/auth/logout")

    client.cookies.clear()
    client.cookies.set("session", second)
    assert client.get("/auth/me").status_code == 200


def test_add_rejects_out_of_range_release_year(client):
    for year in (10**12, -5, 1799, 2201):
        resp = client.post("/movies", json={"title": "X", "release_year": year})
        assert resp.status_code == 422
    assert client.get("/movies").json()["count"] == 0

    assert client.post("/movies", json={"title": "X", "release_year": 1895}).status_code == 201


def test_watched_filter_rejects_sort_and_page_params(client):
    client.post("/movies", json={"title": "Ran"})
    for params in ({"sortBy": "bogus"}, {"page": 0}, {"order": "desc"}, {"limit": 5}):
        resp = client.get("/movies", params={"watched": "false", **params})
        assert resp.status_code == 400
    assert client.get("/movies", params={"watched": "false"}).json()["count"] == 1
