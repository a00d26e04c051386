from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import Field as PydField

from ..models import Payload
from ..services import SessionClaims, ensure_bot_owner, visible_bots, visible_guilds
from ..services.directory import upsert_guild_binding
from ..storage import DocumentStore
from .deps import get_store, require_session

router = APIRouter(prefix="/me", tags=["me"])


class GuildClaim(Payload):
    bot_id: str = PydField(..., min_length=1)
    guild_id: str = PydField(..., min_length=1)
    name: Optional[str] = None
    icon: Optional[str] = None


@router.get("")
def whoami(me: SessionClaims = Depends(require_session)) -> Dict[str, Any]:
    return me.to_doc()


@router.get("/bot-credentials")
def my_bot_credentials(
    me: SessionClaims = Depends(require_session),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    """Caller's bots (admins: all bots), secrets stripped."""
    return {"bots": [b.safe_view().to_doc() for b in visible_bots(store, me)]}


@router.get("/guilds")
def my_guilds(
    me: SessionClaims = Depends(require_session),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    return {"guilds": [g.to_doc() for g in visible_guilds(store, me)]}


@router.post("/guilds/claim")
def claim_guild(
    payload: GuildClaim,
    me: SessionClaims = Depends(require_session),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    """
    Bind a guild to one of the caller's bots (admins may use any bot).
    Upsert by guildId: omitted name/icon keep their stored values.
    """
    bot = ensure_bot_owner(store, me, payload.bot_id)
    binding = upsert_guild_binding(
        store,
        guild_id=payload.guild_id,
        bot_id=bot.id,
        name=payload.name,
        icon=payload.icon,
    )
    return {"ok": True, "guild": binding.to_doc()}
