from __future__ import annotations

from fastapi.testclient import TestClient

from src.protocol.http.app import create_app


def _client() -> TestClient:
    return TestClient(create_app())


def _new_game(client: TestClient, position: str | None = None) -> str:
    body = {"position": position} if position else None
    r = client.post("/api/games", json=body)
    assert r.status_code == 200
    return r.json()["game_id"]


def test_moves_for_square() -> None:
    client = _client()
    game_id = _new_game(client)
    r = client.get(f"/api/games/{game_id}/moves/e2")
    assert r.status_code == 200
    assert r.json() == {"square": "e2", "moves": ["e3", "e4"]}

    r_empty = client.get(f"/api/games/{game_id}/moves/e4")
    assert r_empty.json()["moves"] == []


def test_moves_bad_square_400() -> None:
    client = _client()
    game_id = _new_game(client)
    r = client.get(f"/api/games/{game_id}/moves/z9")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "bad_request"


def test_legal_move_advances_turn() -> None:
    client = _client()
    game_id = _new_game(client)
    r = client.post(f"/api/games/{game_id}/move", json={"from": "e2", "to": "e4"})
    assert r.status_code == 200
    state = r.json()
    assert state["player_to_move"] == "black"
    assert state["board"]["e4"] == "P"
    assert "e2" not in state["board"]
    assert state["position"].endswith(" b")


def test_illegal_move_400_and_state_unchanged() -> None:
    client = _client()
    game_id = _new_game(client)
    before = client.get(f"/api/games/{game_id}/state").json()

    r = client.post(f"/api/games/{game_id}/move", json={"move": "e2e5"})
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "bad_request"
    assert err["message"] == "illegal move"

    after = client.get(f"/api/games/{game_id}/state").json()
    assert after == before


def test_move_request_needs_squares() -> None:
    client = _client()
    game_id = _new_game(client)
    r = client.post(f"/api/games/{game_id}/move", json={"from": "e2"})
    assert r.status_code == 400
    r = client.post(f"/api/games/{game_id}/move", json={"move": "e2"})
    assert r.status_code == 400


def test_move_unknown_game_404() -> None:
    client = _client()
    r = client.post("/api/games/nope/move", json={"move": "e2e4"})
    assert r.status_code == 404


def test_fools_mate_over_http() -> None:
    client = _client()
    game_id = _new_game(client)
    state = None
    for mv in ("f2f3", "e7e5", "g2g4", "d8h4"):
        r = client.post(f"/api/games/{game_id}/move", json={"move": mv})
        assert r.status_code == 200, mv
        state = r.json()
    assert state is not None
    assert state["in_check"] is True
    assert state["checkmate"] is True
    assert state["status"] == "checkmate"

    r = client.post(f"/api/games/{game_id}/move", json={"move": "e1f2"})
    assert r.status_code == 400


def test_perft_endpoint() -> None:
    client = _client()
    r = client.post("/api/perft", json={"depth": 2})
    assert r.status_code == 200
    assert r.json() == {"nodes": 400}

    r_bad = client.post("/api/perft", json={"position": "nonsense", "depth": 1})
    assert r_bad.status_code == 400

    r_blank = client.post("/api/perft", json={"position": "   ", "depth": 1})
    assert r_blank.status_code == 400


def test_perft_depth_validation_422() -> None:
    client = _client()
    r = client.post("/api/perft", json={"depth": 99})
    assert r.status_code == 422
    err = r.json()["error"]
    assert err["code"] == "unprocessable_entity"
    assert any(fe["field"].endswith("depth") for fe in err["field_errors"])
