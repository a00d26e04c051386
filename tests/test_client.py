"""
Bot-side client against the real app over an in-process ASGI transport.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from ticketpanel.client import PanelAPIError, PanelClient, PollerSettings, api_request, poll_once, run_poller_loop
from tests.helpers import API

BASE = f"http://testserver{API}"


def _run(app, scenario):
    async def _main():
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app)) as http:
            return await scenario(http)

    return asyncio.run(_main())


def test_client_calls(app, owned_guild, client):
    key = owned_guild["bot"]["apiKey"]

    async def scenario(http):
        async with PanelClient(BASE, key, client=http) as panel:
            assert await panel.register("g2", guild_name="Two") == {"ok": True}
            await panel.push_roles("g2", [{"id": "r1", "name": "Staff"}])
            await panel.push_channels("g2", [{"id": "c1", "name": "tickets"}])
            config = await panel.fetch_config("g2")
            state = await panel.poll_publish("g2")
        return config, state

    config, state = _run(app, scenario)
    assert config["brand"]["name"] == "Service Bot"
    assert state == {"pending": False, "info": None}

    roles = client.get(f"{API}/guilds/g2/roles", headers=owned_guild["headers"]).json()
    assert roles == {"roles": [{"id": "r1", "name": "Staff"}]}


def test_client_raises_on_bad_key(app, client):
    async def scenario(http):
        async with PanelClient(BASE, "0" * 32, client=http) as panel:
            with pytest.raises(PanelAPIError) as info:
                await panel.fetch_config("g1")
        return info.value

    err = _run(app, scenario)
    assert err.status_code == 401
    assert err.detail == "invalid api key"


def test_api_request_folds_transport_failures():
    def _refuse(request):
        raise httpx.ConnectError("refused", request=request)

    def _slow(request):
        raise httpx.ReadTimeout("slow", request=request)

    async def _main():
        async with httpx.AsyncClient(transport=httpx.MockTransport(_refuse)) as http:
            refused = await api_request(http, "get", "http://panel/api/x")
        async with httpx.AsyncClient(transport=httpx.MockTransport(_slow)) as http:
            slow = await api_request(http, "get", "http://panel/api/x")
        return refused, slow

    refused, slow = asyncio.run(_main())
    assert refused[0] == 503
    assert refused[2] is None
    assert slow[0] == 408


def test_poll_once_consumes_and_fetches(app, owned_guild, client):
    client.put(f"{API}/guilds/g1/config", json={"panel": {"title": "New"}}, headers=owned_guild["headers"])
    client.post(f"{API}/guilds/g1/publish", headers=owned_guild["headers"])
    seen = []

    async def on_publish(guild_id, info, config):
        seen.append((guild_id, info["byUser"], config["panel"]["title"]))

    async def scenario(http):
        async with PanelClient(BASE, owned_guild["bot"]["apiKey"], client=http) as panel:
            first = await poll_once(panel, ["g1", "unbound"], on_publish)
            second = await poll_once(panel, ["g1"], on_publish)
        return first, second

    assert _run(app, scenario) == (1, 0)
    assert seen == [("g1", "bob", "New")]


def test_poller_loop_registers_and_stops(app, owned_guild, client, file_store):
    client.post(f"{API}/guilds/g1/publish", headers=owned_guild["headers"])
    settings = PollerSettings(
        api_base=BASE,
        api_key=owned_guild["bot"]["apiKey"],
        guild_ids=["g1", "g3"],
        poll_interval_s=1.0,
    )
    seen = []

    async def scenario(http):
        stop = asyncio.Event()

        async def on_publish(guild_id, info, config):
            seen.append(guild_id)
            stop.set()

        panel = PanelClient(settings.api_base, settings.api_key, client=http)
        await asyncio.wait_for(run_poller_loop(settings, on_publish=on_publish, stop=stop, client=panel), timeout=10)

    _run(app, scenario)
    assert seen == ["g1"]
    guilds = client.get(f"{API}/me/guilds", headers=owned_guild["headers"]).json()["guilds"]
    assert sorted(g["guildId"] for g in guilds) == ["g1", "g3"]


@pytest.mark.parametrize(
    "overrides",
    [{"api_key": ""}, {"guild_ids": []}, {"poll_interval_s": 0.5}],
)
def test_poller_settings_validate(overrides):
    values = {"api_base": BASE, "api_key": "k", "guild_ids": ["g1"], "poll_interval_s": 5.0}
    values.update(overrides)
    with pytest.raises(RuntimeError):
        PollerSettings(**values).validate()
