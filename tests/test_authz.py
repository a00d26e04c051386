"""
Ownership chain for panel routes: guild -> bound bot -> owner user (or admin).
"""

from __future__ import annotations

import pytest

from tests.helpers import API, api_key

OWNER_ROUTES = [
    ("get", "/roles", None),
    ("get", "/channels", None),
    ("get", "/config", None),
    ("put", "/config", {"brand": {"name": "X"}}),
    ("post", "/publish", None),
]


def _call(client, method, path, body, headers):
    kwargs = {"headers": headers}
    if body is not None:
        kwargs["json"] = body
    return getattr(client, method)(path, **kwargs)


@pytest.mark.parametrize("method,suffix,body", OWNER_ROUTES)
def test_owner_and_admin_pass(client, owned_guild, admin_headers, method, suffix, body):
    path = f"{API}/guilds/{owned_guild['guild_id']}{suffix}"
    assert _call(client, method, path, body, owned_guild["headers"]).status_code == 200
    assert _call(client, method, path, body, admin_headers).status_code == 200


@pytest.mark.parametrize("method,suffix,body", OWNER_ROUTES)
def test_other_user_is_forbidden(client, owned_guild, make_user, login, method, suffix, body):
    make_user("vic")
    path = f"{API}/guilds/{owned_guild['guild_id']}{suffix}"
    resp = _call(client, method, path, body, login("vic"))
    assert resp.status_code == 403


@pytest.mark.parametrize("method,suffix,body", OWNER_ROUTES)
def test_anonymous_is_unauthenticated(client, owned_guild, method, suffix, body):
    path = f"{API}/guilds/{owned_guild['guild_id']}{suffix}"
    assert _call(client, method, path, body, {}).status_code == 401


def test_forbidden_request_leaves_state_alone(client, owned_guild, make_user, login, admin_headers):
    make_user("vic")
    vic = login("vic")
    client.put(f"{API}/guilds/g1/config", json={"brand": {"name": "Hijacked"}}, headers=vic)
    client.post(f"{API}/guilds/g1/publish", headers=vic)

    assert client.get(f"{API}/guilds/g1/config", headers=admin_headers).json()["brand"]["name"] == "Service Bot"
    peek = client.get(f"{API}/bots/guilds/g1/publish", headers=api_key(owned_guild["bot"]["apiKey"]))
    assert peek.json() == {"pending": False, "info": None}


def test_unknown_guild_is_not_found(client, admin_headers):
    resp = client.get(f"{API}/guilds/nope/config", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "not found: guild"


def test_binding_to_deleted_bot_is_not_found(client, owned_guild, admin_headers):
    client.delete(f"{API}/bot-credentials/{owned_guild['bot']['id']}", headers=admin_headers)
    for headers in (owned_guild["headers"], admin_headers):
        resp = client.get(f"{API}/guilds/g1/roles", headers=headers)
        assert resp.status_code == 404
        assert resp.json()["detail"] == "not found: bot"


def test_ownership_follows_current_owner(client, owned_guild, make_user, login, admin_headers):
    vic = make_user("vic")
    client.put(
        f"{API}/bot-credentials/{owned_guild['bot']['id']}/owner",
        json={"ownerUserId": vic["id"]},
        headers=admin_headers,
    )
    # existing tokens keep working; the check reads the stored owner every time
    assert client.get(f"{API}/guilds/g1/config", headers=owned_guild["headers"]).status_code == 403
    assert client.get(f"{API}/guilds/g1/config", headers=login("vic")).status_code == 200


def test_my_guilds_follow_bot_ownership(client, owned_guild, make_user, login, admin_headers):
    make_user("vic")
    mine = client.get(f"{API}/me/guilds", headers=owned_guild["headers"]).json()["guilds"]
    assert [g["guildId"] for g in mine] == ["g1"]
    assert client.get(f"{API}/me/guilds", headers=login("vic")).json() == {"guilds": []}
    assert [g["guildId"] for g in client.get(f"{API}/me/guilds", headers=admin_headers).json()["guilds"]] == ["g1"]


def test_claim_guild_requires_bot_ownership(client, owned_guild, make_user, login, make_bot):
    make_user("vic")
    vic = login("vic")
    other = make_bot("Other")

    resp = client.post(f"{API}/me/guilds/claim", json={"botId": owned_guild["bot"]["id"], "guildId": "g2"}, headers=vic)
    assert resp.status_code == 403
    resp = client.post(f"{API}/me/guilds/claim", json={"botId": "missing", "guildId": "g2"}, headers=vic)
    assert resp.status_code == 404

    resp = client.post(
        f"{API}/me/guilds/claim",
        json={"botId": owned_guild["bot"]["id"], "guildId": "g2", "name": "Second"},
        headers=owned_guild["headers"],
    )
    assert resp.status_code == 200
    assert resp.json()["guild"]["name"] == "Second"
    assert resp.json()["guild"]["botId"] == owned_guild["bot"]["id"]

    # bob cannot move his guild onto a bot he does not own
    resp = client.post(
        f"{API}/me/guilds/claim",
        json={"botId": other["id"], "guildId": "g1"},
        headers=owned_guild["headers"],
    )
    assert resp.status_code == 403
