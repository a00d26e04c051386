from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 20.0


class PanelAPIError(Exception):
    """Non-2xx answer (or transport failure) from the panel backend."""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"panel API error ({status_code}): {detail}")


def _safe_json(r: httpx.Response) -> Optional[dict]:
    """
    Best-effort JSON parse:
      - returns dict if payload is a dict
      - returns None if not JSON or not dict
    """
    try:
        payload = r.json()
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


async def api_request(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    json: Optional[Dict[str, Any]] = None,
    timeout: float = DEFAULT_TIMEOUT_S,
) -> Tuple[int, str, Optional[dict]]:
    """
    Low-level request helper.
    Returns: (status_code, response_text, json_dict_or_none)
    Transport failures are folded into pseudo status codes (408 timeout, 503 network).
    """
    m = (method or "GET").strip().upper()
    try:
        r = await client.request(m, url, params=params, json=json, timeout=float(timeout))
    except httpx.TimeoutException:
        return 408, "Request timed out contacting panel API.", None
    except httpx.RequestError as e:
        return 503, f"Network error contacting panel API: {e}", None

    return r.status_code, r.text, _safe_json(r)


class PanelClient:
    """
    What a bot process needs from the panel backend, authenticated with its API key.

    Usage:
        async with PanelClient(base_url, api_key) as panel:
            await panel.register(guild_id, guild_name="My server")
            state = await panel.poll_publish(guild_id, consume=True)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_S,
        user_agent: str = "ticket-panel-bot/1.0",
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = float(timeout)
        self._owns_client = client is None
        self.api = client or httpx.AsyncClient(
            timeout=self.timeout,
            limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            follow_redirects=True,
        )
        self.api.headers.update({"x-api-key": api_key, "User-Agent": user_agent})

    async def __aenter__(self) -> "PanelClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.api.aclose()

    async def _call(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        p = path if path.startswith("/") else f"/{path}"
        code, text, data = await api_request(self.api, method, f"{self.base_url}{p}", timeout=self.timeout, **kwargs)
        if code != 200 or data is None:
            detail = data.get("detail") if isinstance(data, dict) else None
            raise PanelAPIError(code, str(detail or text[:300]))
        return data

    async def register(self, guild_id: str, *, guild_name: Optional[str] = None, icon: Optional[str] = None) -> Dict[str, Any]:
        return await self._call("POST", "/bots/register", json={"guildId": guild_id, "guildName": guild_name, "icon": icon})

    async def push_roles(self, guild_id: str, roles: List[Dict[str, Any]]) -> Dict[str, Any]:
        return await self._call("POST", f"/guilds/{guild_id}/roles", json={"roles": roles})

    async def push_channels(self, guild_id: str, channels: List[Dict[str, Any]]) -> Dict[str, Any]:
        return await self._call("POST", f"/guilds/{guild_id}/channels", json={"channels": channels})

    async def fetch_config(self, guild_id: str) -> Dict[str, Any]:
        return await self._call("GET", f"/bots/guilds/{guild_id}/config")

    async def poll_publish(self, guild_id: str, *, consume: bool = False) -> Dict[str, Any]:
        return await self._call("GET", f"/bots/guilds/{guild_id}/publish", params={"consume": "1" if consume else "0"})
