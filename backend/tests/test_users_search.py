from fastapi.testclient import TestClient

from app import models
from app.core.security import hash_password
from app.db import SessionLocal

from .utils import register_and_token


def _bulk_users(count: int, prefix: str = "team") -> None:
    with SessionLocal() as db:
        for i in range(count):
            db.add(models.User(email=f"{prefix}{i:02d}@example.com", hashed_password=hash_password("secret1")))
        db.commit()


def test_search_is_case_insensitive_and_excludes_caller(client: TestClient):
    _, alice = register_and_token(client, "alice@example.com")
    register_and_token(client, "alina@example.com")
    register_and_token(client, "bob@example.com")

    resp = client.get("/api/users/search", params={"q": "AL"}, headers=alice)
    assert resp.status_code == 200
    assert [u["email"] for u in resp.json()["items"]] == ["alina@example.com"]


def test_search_caps_results_ordered_by_email(client: TestClient):
    _, headers = register_and_token(client, "owner@example.com")
    _bulk_users(12)

    items = client.get("/api/users/search", params={"q": "team"}, headers=headers).json()["items"]
    assert len(items) == 10
    assert [u["email"] for u in items] == [f"team{i:02d}@example.com" for i in range(10)]


def test_search_requires_two_characters(client: TestClient):
    _, headers = register_and_token(client, "owner@example.com")

    for q in ("a", " b ", ""):
        resp = client.get("/api/users/search", params={"q": q}, headers=headers)
        assert resp.status_code == 400
        assert "q" in resp.json()["details"]

    assert client.get("/api/users/search", headers=headers).status_code == 400


def test_search_escapes_like_wildcards(client: TestClient):
    _, headers = register_and_token(client, "owner@example.com")
    register_and_token(client, "under_score@example.com")
    register_and_token(client, "underXscore@example.com")

    items = client.get("/api/users/search", params={"q": "r_s"}, headers=headers).json()["items"]
    assert [u["email"] for u in items] == ["under_score@example.com"]

    assert client.get("/api/users/search", params={"q": "%%"}, headers=headers).json()["items"] == []


def test_search_requires_login(client: TestClient):
    assert client.get("/api/users/search", params={"q": "al"}).status_code == 401
