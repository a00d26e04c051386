"""
App-level behavior: error envelope, body limit, CORS, request validation.
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from ticketpanel.main import create_app
from tests.helpers import API


def test_unknown_route_names_method_and_path(client):
    resp = client.get(f"{API}/nope")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "not found: GET /api/nope"}


def test_validation_errors_are_400(client, admin_headers):
    resp = client.post(f"{API}/users", json={"username": 5, "password": ["x"]}, headers=admin_headers)
    assert resp.status_code == 400
    body = resp.json()
    assert body["detail"] == "invalid input"
    assert body["errors"]


def test_oversized_body_is_rejected(client, settings):
    big = {"username": "x" * (settings.max_body_bytes + 1), "password": "y"}
    resp = client.post(f"{API}/sessions/user", json=big)
    assert resp.status_code == 413
    assert resp.json() == {"detail": "payload too large"}


def test_chunked_body_without_length_is_capped(client, settings):
    def _chunks():
        yield b'{"username": "'
        yield b"x" * (settings.max_body_bytes + 1)
        yield b'", "password": "y"}'

    resp = client.post(f"{API}/sessions/user", content=_chunks(), headers={"Content-Type": "application/json"})
    assert resp.status_code == 413
    assert resp.json() == {"detail": "payload too large"}


def test_chunked_body_under_the_cap_is_accepted(client):
    def _chunks():
        yield b'{"username": "admin", '
        yield b'"password": "admin123"}'

    resp = client.post(f"{API}/sessions/admin", content=_chunks(), headers={"Content-Type": "application/json"})
    assert resp.status_code == 200


def test_storage_failure_is_a_generic_500(client, admin_headers, file_store):
    file_store.path_for("bot-credentials").write_text("{not json", encoding="utf-8")
    resp = client.get(f"{API}/bot-credentials", headers=admin_headers)
    assert resp.status_code == 500
    assert resp.json() == {"detail": "internal error"}


def test_unhandled_error_is_a_generic_500(settings, file_store):
    app = create_app(settings=settings, store=file_store)

    @app.get("/boom")
    def boom():
        raise RuntimeError("secret details")

    with TestClient(app, raise_server_exceptions=False) as c:
        resp = c.get("/boom")
    assert resp.status_code == 500
    assert resp.json() == {"detail": "internal error"}


def test_cors_preflight(client):
    resp = client.options(
        f"{API}/sessions/admin",
        headers={"Origin": "https://panel.example", "Access-Control-Request-Method": "POST"},
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] in ("*", "https://panel.example")


def test_shutdown_closes_store(settings, file_store):
    closed = []
    file_store.close = lambda: closed.append(True)
    with TestClient(create_app(settings=settings, store=file_store)):
        pass
    assert closed == [True]
