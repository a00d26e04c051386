"""
Authorization chain: guild -> bound bot credential -> owning user.

Evaluated from the stored documents on every call. Bot-key routes never come
through here; a valid API key is trusted for whatever guild it names.
"""

from __future__ import annotations

from typing import List, Tuple

from ..errors import Forbidden, NotFound
from ..models import BotCredential, GuildBinding
from ..storage import DocumentStore
from .directory import find_binding, find_bot, load_bindings, load_bots
from .identity import SessionClaims


def ensure_admin(claims: SessionClaims) -> SessionClaims:
    if not claims.is_admin:
        raise Forbidden("admin only")
    return claims


def owns(claims: SessionClaims, bot: BotCredential) -> bool:
    return claims.is_admin or (bot.owner_user_id is not None and bot.owner_user_id == claims.subject_id)


def ensure_bot_owner(store: DocumentStore, claims: SessionClaims, bot_id: str) -> BotCredential:
    bot = find_bot(store, bot_id)
    if bot is None:
        raise NotFound("not found: bot")
    if not owns(claims, bot):
        raise Forbidden("not the owner of this bot")
    return bot


def ensure_guild_owner(store: DocumentStore, claims: SessionClaims, guild_id: str) -> Tuple[GuildBinding, BotCredential]:
    """
    Owner-or-admin gate for guild-scoped panel routes.

    unknown guild -> NotFound("not found: guild")
    bound bot missing -> NotFound("not found: bot")
    neither admin nor owner of the bound bot -> Forbidden
    """
    binding = find_binding(store, guild_id)
    if binding is None:
        raise NotFound("not found: guild")
    bot = find_bot(store, binding.bot_id)
    if bot is None:
        raise NotFound("not found: bot")
    if not owns(claims, bot):
        raise Forbidden("not the owner of this guild")
    return binding, bot


def visible_bots(store: DocumentStore, claims: SessionClaims) -> List[BotCredential]:
    """Admins see every credential, everyone else only the ones they own."""
    return [b for b in load_bots(store) if owns(claims, b)]


def visible_guilds(store: DocumentStore, claims: SessionClaims) -> List[GuildBinding]:
    bot_ids = {b.id for b in visible_bots(store, claims)}
    return [g for g in load_bindings(store) if g.bot_id in bot_ids]
