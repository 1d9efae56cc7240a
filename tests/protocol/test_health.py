from __future__ import annotations

from fastapi.testclient import TestClient

from royalchess.protocol.http.app import create_app
from royalchess.protocol.http.logging_middleware import game_id_from_path


def test_healthz_ok() -> None:
    client = TestClient(create_app())
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
    assert "x-request-id" in r.headers


def test_request_id_is_echoed() -> None:
    client = TestClient(create_app())
    r = client.get("/healthz", headers={"x-request-id": "abc-123"})
    assert r.headers["x-request-id"] == "abc-123"


def test_game_id_from_path() -> None:
    assert game_id_from_path("/api/games/abc/state") == "abc"
    assert game_id_from_path("/api/games/abc") == "abc"
    assert game_id_from_path("/api/games") is None
    assert game_id_from_path("/healthz") is None
