from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from chessroom.config import Settings
from chessroom.protocol.http.app import create_app


def _app() -> FastAPI:
    return create_app(Settings())


def test_error_envelope_for_http_exception() -> None:
    app = _app()

    @app.get("/boom")
    def boom():  # type: ignore[no-redef]
        raise HTTPException(status_code=400, detail="oops")

    client = TestClient(app)
    r = client.get("/boom")
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "bad_request"
    assert err["message"] == "oops"
    assert err["type"] == "client_error"
    assert err["request_id"]


def test_unhandled_exception_is_server_error() -> None:
    app = _app()

    @app.get("/crash")
    def crash():  # type: ignore[no-redef]
        raise RuntimeError("kaboom")

    client = TestClient(app, raise_server_exceptions=False)
    r = client.get("/crash")
    assert r.status_code == 500
    err = r.json()["error"]
    assert err["code"] == "internal_error"
    assert err["type"] == "server_error"
    assert "kaboom" not in err["message"]


def test_invalid_fen_maps_to_400() -> None:
    client = TestClient(_app())
    r = client.post("/api/status", json={"fen": "not a fen"})
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "invalid_fen"
    assert err["message"].startswith("invalid FEN")


def test_missing_king_maps_to_422() -> None:
    client = TestClient(_app())
    r = client.post("/api/status", json={"fen": "8/8/8/8/8/8/8/R6k w - - 0 1"})
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "invalid_position"


def test_request_validation_lists_fields() -> None:
    client = TestClient(_app())
    r = client.post("/api/moves/legal", json={})
    assert r.status_code == 422
    err = r.json()["error"]
    assert err["code"] == "unprocessable_entity"
    assert any(fe["field"] == "body.fen" for fe in err["field_errors"])
