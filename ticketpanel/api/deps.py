from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, Request

from ..config import Settings
from ..models import BotCredential, GuildBinding
from ..services import (
    PublishCoordinator,
    SessionClaims,
    authenticate_bot,
    authenticate_session,
    ensure_admin,
    ensure_guild_owner,
)
from ..storage import DocumentStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_publisher(store: DocumentStore = Depends(get_store)) -> PublishCoordinator:
    return PublishCoordinator(store)


def require_session(request: Request, settings: Settings = Depends(get_settings)) -> SessionClaims:
    """
    FastAPI dependency:
        def route(me: SessionClaims = Depends(require_session)): ...
    Token check only; no document is read before the caller is authenticated.
    """
    claims = authenticate_session(settings, request.headers.get("Authorization"))
    request.state.user = claims
    return claims


def require_admin(claims: SessionClaims = Depends(require_session)) -> SessionClaims:
    return ensure_admin(claims)


def require_guild_owner(
    guild_id: str,
    claims: SessionClaims = Depends(require_session),
    store: DocumentStore = Depends(get_store),
) -> GuildBinding:
    binding, _bot = ensure_guild_owner(store, claims, guild_id)
    return binding


def require_bot(
    request: Request,
    x_api_key: Optional[str] = Header(default=None, alias="x-api-key"),
    store: DocumentStore = Depends(get_store),
) -> BotCredential:
    bot = authenticate_bot(store, x_api_key)
    request.state.bot = bot
    return bot
