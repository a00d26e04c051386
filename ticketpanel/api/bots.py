"""
Routes called by bot processes, authenticated by x-api-key only.

A valid key is trusted for any guild id it names: registration and roster pushes
are not checked against existing bindings.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import Field as PydField

from ..models import BotCredential, Payload
from ..services import PublishCoordinator
from ..services.directory import upsert_guild_binding
from ..services.guild_data import read_guild_config, replace_roster
from ..storage import GUILD_CHANNELS, GUILD_ROLES, DocumentStore
from .deps import get_publisher, get_store, require_bot

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bot"], dependencies=[Depends(require_bot)])


class BotRegister(Payload):
    guild_id: str = PydField(..., min_length=1)
    guild_name: Optional[str] = None
    icon: Optional[str] = None


class RolesPush(Payload):
    roles: List[Dict[str, Any]]


class ChannelsPush(Payload):
    channels: List[Dict[str, Any]]


@router.post("/bots/register")
def register_guild(
    payload: BotRegister,
    bot: BotCredential = Depends(require_bot),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    binding = upsert_guild_binding(
        store,
        guild_id=payload.guild_id,
        bot_id=bot.id,
        name=payload.guild_name,
        icon=payload.icon,
    )
    logger.info("Bot %s registered guild %s", bot.id, binding.guild_id)
    return {"ok": True}


@router.post("/guilds/{guild_id}/roles")
def push_roles(guild_id: str, payload: RolesPush, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    replace_roster(store, GUILD_ROLES, guild_id, payload.roles)
    return {"ok": True}


@router.post("/guilds/{guild_id}/channels")
def push_channels(guild_id: str, payload: ChannelsPush, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    replace_roster(store, GUILD_CHANNELS, guild_id, payload.channels)
    return {"ok": True}


@router.get("/bots/guilds/{guild_id}/config")
def bot_guild_config(guild_id: str, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    return read_guild_config(store, guild_id)


@router.get("/bots/guilds/{guild_id}/publish")
def poll_publish(
    guild_id: str,
    consume: str = "0",
    publisher: PublishCoordinator = Depends(get_publisher),
) -> Dict[str, Any]:
    """
    consume=1 takes the pending flag (pending -> empty); anything else only peeks.
    """
    if consume.strip().lower() in ("1", "true"):
        return publisher.consume(guild_id)
    return publisher.peek(guild_id)
