from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    if v is None:
        return default
    return v


def _env_float(name: str, default: float) -> float:
    raw = _env(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _norm_url(raw: str) -> str:
    return (raw or "").strip().rstrip("/")


def _split_csv(raw: str) -> List[str]:
    parts = [p.strip() for p in (raw or "").split(",")]
    return [p for p in parts if p]


@dataclass(frozen=True)
class PollerSettings:
    """
    Bot-side settings (the process that polls the panel backend).
    Read from the environment at construction time.
    """

    # Backend base URL including the API prefix, e.g. http://127.0.0.1:3001/api
    api_base: str = field(default_factory=lambda: _norm_url(_env("PANEL_API_BASE", "http://127.0.0.1:3001/api")))
    api_key: str = field(default_factory=lambda: _env("PANEL_API_KEY", "").strip())

    # Guilds this bot serves and polls publish flags for
    guild_ids: List[str] = field(default_factory=lambda: _split_csv(_env("PANEL_GUILD_IDS", "")))
    poll_interval_s: float = field(default_factory=lambda: _env_float("PANEL_POLL_INTERVAL", 15.0))

    # HTTP
    http_timeout_s: float = field(default_factory=lambda: _env_float("PANEL_HTTP_TIMEOUT", 20.0))
    http_user_agent: str = field(
        default_factory=lambda: _env("PANEL_HTTP_USER_AGENT", "ticket-panel-bot/1.0").strip() or "ticket-panel-bot/1.0"
    )

    def validate(self) -> None:
        if not self.api_key:
            raise RuntimeError("PANEL_API_KEY is not set in environment (.env).")

        if not self.api_base:
            raise RuntimeError("PANEL_API_BASE is empty/invalid.")

        if not self.guild_ids:
            raise RuntimeError("PANEL_GUILD_IDS lists no guilds to poll.")

        if self.poll_interval_s < 1:
            raise RuntimeError("PANEL_POLL_INTERVAL must be at least 1 second.")
