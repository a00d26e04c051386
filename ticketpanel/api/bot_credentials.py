from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import Field as PydField

from ..errors import NotFound
from ..models import BotCredential, Payload
from ..services.directory import load_bots
from ..services.security import generate_api_key, new_id
from ..storage import BOT_CREDENTIALS, DocumentStore, default_for
from .deps import get_store, require_admin

router = APIRouter(prefix="/bot-credentials", tags=["bot-credentials"], dependencies=[Depends(require_admin)])


# -----------------------------
# Schemas (ids and api keys are never accepted from callers)
# -----------------------------

class BotCreate(Payload):
    name: str = PydField(..., min_length=1)
    discord_app_id: Optional[str] = None
    token: Optional[str] = None


class OwnerAssign(Payload):
    owner_user_id: Optional[str] = None


class SecretRotate(Payload):
    token: Optional[str] = None
    discord_app_id: Optional[str] = None


# -----------------------------
# Helpers
# -----------------------------

def _mutate_bot(store: DocumentStore, bot_id: str, change) -> BotCredential:
    def _apply(bots: list) -> BotCredential:
        for idx, raw in enumerate(bots):
            if raw.get("id") != bot_id:
                continue
            bot = BotCredential.model_validate(raw)
            change(bot)
            bots[idx] = bot.to_doc()
            return bot
        raise NotFound("not found: bot")

    return store.update(BOT_CREDENTIALS, default_for(BOT_CREDENTIALS), _apply)


# -----------------------------
# Routes
# -----------------------------

@router.get("")
def list_bot_credentials(store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    return {"bots": [b.safe_view().to_doc() for b in load_bots(store)]}


@router.post("")
def create_bot_credential(payload: BotCreate, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    """
    Register a bot. Always mints a fresh id + API key; the Discord token is stored
    only when supplied and never returned.
    """
    bot = BotCredential(
        id=new_id(),
        name=payload.name,
        api_key=generate_api_key(),
        owner_user_id=None,
        discord_app_id=payload.discord_app_id or None,
        token=payload.token or None,
    )

    def _add(bots: list) -> None:
        bots.append(bot.to_doc())

    store.update(BOT_CREDENTIALS, default_for(BOT_CREDENTIALS), _add)
    return {"ok": True, "bot": bot.safe_view().to_doc()}


@router.put("/{bot_id}/owner")
def assign_owner(bot_id: str, payload: OwnerAssign, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    """
    Owner is a soft reference; an unknown user id is stored as given.
    """

    def _change(bot: BotCredential) -> None:
        bot.owner_user_id = payload.owner_user_id or None

    bot = _mutate_bot(store, bot_id, _change)
    return {"ok": True, "bot": bot.safe_view().to_doc()}


@router.put("/{bot_id}/secret")
def rotate_secret(bot_id: str, payload: SecretRotate, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    def _change(bot: BotCredential) -> None:
        if payload.token is not None:
            bot.token = payload.token
        if payload.discord_app_id is not None:
            bot.discord_app_id = payload.discord_app_id

    _mutate_bot(store, bot_id, _change)
    return {"ok": True}


@router.delete("/{bot_id}")
def delete_bot_credential(bot_id: str, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    """
    Guild bindings that point at this bot are left alone; owner checks on them
    answer "not found: bot" from now on.
    """

    def _remove(bots: list) -> None:
        for idx, raw in enumerate(bots):
            if raw.get("id") == bot_id:
                del bots[idx]
                return
        raise NotFound("not found: bot")

    store.update(BOT_CREDENTIALS, default_for(BOT_CREDENTIALS), _remove)
    return {"ok": True}
