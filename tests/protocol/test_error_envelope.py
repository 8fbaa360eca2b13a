from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from src.engine.errors import EmptySquareError
from src.protocol.http.app import create_app


def test_error_envelope_for_http_exception() -> None:
    app: FastAPI = create_app()

    @app.get("/boom")
    def boom():  # type: ignore[no-redef]
        raise HTTPException(status_code=400, detail="oops")

    client = TestClient(app)
    r = client.get("/boom")
    assert r.status_code == 400
    body = r.json()
    assert "error" in body
    err = body["error"]
    assert err["code"] == "bad_request"
    assert err["message"] == "oops"
    assert err["type"] == "client_error"
    assert err["request_id"]


def test_engine_invariant_maps_to_500() -> None:
    app: FastAPI = create_app()

    @app.get("/invariant")
    def invariant():  # type: ignore[no-redef]
        raise EmptySquareError("no piece to move on (4, 3)")

    client = TestClient(app)
    r = client.get("/invariant")
    assert r.status_code == 500
    err = r.json()["error"]
    assert err["code"] == "engine_invariant"
    assert err["type"] == "server_error"
    # Internal details stay out of the response.
    assert "(4, 3)" not in err["message"]


def test_request_id_header_is_echoed() -> None:
    client = TestClient(create_app())
    r = client.get("/api/games/missing/state", headers={"x-request-id": "abc-123"})
    assert r.status_code == 404
    assert r.headers["x-request-id"] == "abc-123"
    assert r.json()["error"]["request_id"] == "abc-123"
