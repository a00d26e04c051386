"""
Shared fixtures: settings pointing at a temp folder, both storage backends,
an app + TestClient per test, and small helpers for the admin setup steps.
"""

from __future__ import annotations

from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from ticketpanel.config import Settings
from ticketpanel.main import create_app
from ticketpanel.storage import FileDocumentStore, TableDocumentStore

from tests.helpers import API, api_key, bearer


# =============================================================================
# Settings / stores
# =============================================================================

@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        data_dir=str(tmp_path / "data"),
        db_path=str(tmp_path / "documents.sqlite"),
        storage_backend="file",
        admin_user="admin",
        admin_pass="admin123",
        jwt_secret="test-secret",
        jwt_algorithm="HS256",
        bcrypt_rounds=4,
        api_prefix="/api",
        max_body_bytes=50_000,
    )


@pytest.fixture
def file_store(tmp_path) -> FileDocumentStore:
    return FileDocumentStore(tmp_path / "data")


@pytest.fixture
def table_store(tmp_path):
    store = TableDocumentStore(database_url=f"sqlite:///{tmp_path / 'documents.sqlite'}")
    yield store
    store.close()


@pytest.fixture(params=["file", "table"])
def store(request, file_store, tmp_path):
    """Every storage contract test runs against both backends."""
    if request.param == "file":
        yield file_store
        return
    table = TableDocumentStore(database_url=f"sqlite:///{tmp_path / 'contract.sqlite'}")
    yield table
    table.close()


# =============================================================================
# App / client
# =============================================================================

@pytest.fixture
def app(settings, file_store):
    return create_app(settings=settings, store=file_store)


@pytest.fixture
def client(app):
    # Context manager runs startup (admin seed) and shutdown.
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_headers(client) -> Dict[str, str]:
    resp = client.post(f"{API}/sessions/admin", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200, resp.text
    return bearer(resp.json()["token"])


@pytest.fixture
def make_user(client, admin_headers):
    def _make(username: str, password: str = "pw1", is_admin: bool = False) -> Dict[str, Any]:
        resp = client.post(
            f"{API}/users",
            json={"username": username, "password": password, "isAdmin": is_admin},
            headers=admin_headers,
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["user"]

    return _make


@pytest.fixture
def login(client):
    def _login(username: str, password: str = "pw1") -> Dict[str, str]:
        resp = client.post(f"{API}/sessions/user", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.text
        return bearer(resp.json()["token"])

    return _login


@pytest.fixture
def make_bot(client, admin_headers):
    def _make(name: str = "Helper", owner_user_id: str = None, **extra: Any) -> Dict[str, Any]:
        resp = client.post(f"{API}/bot-credentials", json={"name": name, **extra}, headers=admin_headers)
        assert resp.status_code == 200, resp.text
        bot = resp.json()["bot"]
        if owner_user_id is not None:
            resp = client.put(
                f"{API}/bot-credentials/{bot['id']}/owner",
                json={"ownerUserId": owner_user_id},
                headers=admin_headers,
            )
            assert resp.status_code == 200, resp.text
            bot = resp.json()["bot"]
        return bot

    return _make


@pytest.fixture
def owned_guild(client, make_user, login, make_bot):
    """
    bob owns bot "Helper", which serves guild g1 (registered by the bot itself).
    """
    bob = make_user("bob")
    bot = make_bot("Helper", owner_user_id=bob["id"])
    resp = client.post(
        f"{API}/bots/register",
        json={"guildId": "g1", "guildName": "Guild One"},
        headers=api_key(bot["apiKey"]),
    )
    assert resp.status_code == 200, resp.text
    return {"user": bob, "bot": bot, "guild_id": "g1", "headers": login("bob")}

