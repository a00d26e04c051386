from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from ..models import GuildConfig
from ..services import PublishCoordinator, SessionClaims
from ..services.guild_data import read_guild_config, read_roster, save_guild_config
from ..storage import GUILD_CHANNELS, GUILD_ROLES, DocumentStore
from .deps import get_publisher, get_store, require_guild_owner, require_session

# Panel view of a guild: owner of the bound bot, or admin.
router = APIRouter(prefix="/guilds/{guild_id}", tags=["guilds"], dependencies=[Depends(require_guild_owner)])


@router.get("/roles")
def guild_roles(guild_id: str, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    return {"roles": read_roster(store, GUILD_ROLES, guild_id)}


@router.get("/channels")
def guild_channels(guild_id: str, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    return {"channels": read_roster(store, GUILD_CHANNELS, guild_id)}


@router.get("/config")
def get_guild_config(guild_id: str, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    """
    Stored config, or the full default structure when none was saved (not persisted).
    """
    return read_guild_config(store, guild_id)


@router.put("/config")
def put_guild_config(
    guild_id: str,
    config: GuildConfig = Body(...),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    """
    Wholesale replace. Sections are shape-checked; whatever keys were sent are what is stored.
    """
    save_guild_config(store, guild_id, config)
    return {"ok": True}


@router.post("/publish")
def request_publish(
    guild_id: str,
    me: SessionClaims = Depends(require_session),
    publisher: PublishCoordinator = Depends(get_publisher),
) -> Dict[str, Any]:
    flag = publisher.request(guild_id, me.username)
    return {"ok": True, "requestedAt": flag.requested_at}
