from __future__ import annotations

from fastapi.testclient import TestClient

from royalchess.config import Settings
from royalchess.protocol.http.app import create_app
from royalchess.protocol.http.session import InMemorySessionStore


def _client() -> TestClient:
    return TestClient(create_app())


def test_create_game_and_get_state() -> None:
    client = _client()
    r = client.post("/api/games")
    assert r.status_code == 200
    body = r.json()
    assert "game_id" in body and isinstance(body["game_id"], str) and body["game_id"]
    game_id = body["game_id"]
    assert body["mode"] == "two-player"
    assert body["board"][0] == "rnbqkbnr"
    assert body["side_to_move"] == "white"
    assert body["moves_remaining"] == 1
    assert body["turn_number"] == 1
    assert body["status"] == "playing"
    assert body["status_message"] == "White's turn - 1 move remaining (Turn 1)"

    r2 = client.get(f"/api/games/{game_id}/state")
    assert r2.status_code == 200
    state = r2.json()
    assert state["game_id"] == game_id
    assert set(state["legal_moves"]["g1"]) == {"f3", "h3"}
    assert len(state["legal_moves"]) == 10


def test_create_solo_game() -> None:
    client = _client()
    r = client.post("/api/games", json={"mode": "solo", "seed": 5})
    assert r.status_code == 200
    assert r.json()["mode"] == "solo"


def test_create_with_unknown_mode_is_422() -> None:
    client = _client()
    r = client.post("/api/games", json={"mode": "three-player"})
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "unprocessable_entity"


def test_get_state_unknown_id_404() -> None:
    client = _client()
    r = client.get("/api/games/does-not-exist/state")
    assert r.status_code == 404
    body = r.json()
    assert "error" in body
    assert body["error"]["code"] == "not_found"


def test_delete_game() -> None:
    client = _client()
    game_id = client.post("/api/games").json()["game_id"]
    r = client.delete(f"/api/games/{game_id}")
    assert r.status_code == 200
    assert r.json() == {"status": "deleted"}
    assert client.get(f"/api/games/{game_id}/state").status_code == 404
    assert client.delete(f"/api/games/{game_id}").status_code == 404


def test_store_tracks_sessions() -> None:
    store = InMemorySessionStore()
    a = store.create()
    b = store.create()
    assert a != b
    assert len(store) == 2
    assert store.get(a) is not None
    assert store.delete(a)
    assert store.get(a) is None
    assert not store.delete(a)
    assert len(store) == 1


def test_store_evicts_least_recently_used() -> None:
    store = InMemorySessionStore(max_sessions=2)
    a = store.create()
    b = store.create()
    assert store.get(a) is not None
    c = store.create()
    assert len(store) == 2
    assert store.get(b) is None
    assert store.get(a) is not None
    assert store.get(c) is not None


def test_app_keeps_settings() -> None:
    app = create_app(Settings(bot_seed=9, max_sessions=5))
    assert app.state.settings.bot_seed == 9
    assert app.state.store.max_sessions == 5
    assert len(app.state.store) == 0
