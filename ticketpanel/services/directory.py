"""
Lookups and upserts over the users / bot-credentials / guild-bindings documents.

Every call reads the current document; nothing here is cached, so ownership and
bindings are always evaluated against what is stored right now.
"""

from __future__ import annotations

from typing import Any, List, Optional

from ..models import BotCredential, GuildBinding, User
from ..storage import BOT_CREDENTIALS, GUILD_BINDINGS, USERS, DocumentStore, default_for
from .security import keys_match


def load_users(store: DocumentStore) -> List[User]:
    return [User.model_validate(u) for u in store.read(USERS, default_for(USERS))]


def find_user_by_username(store: DocumentStore, username: Any) -> Optional[User]:
    if not isinstance(username, str):
        return None
    return next((u for u in load_users(store) if u.username == username), None)


def load_bots(store: DocumentStore) -> List[BotCredential]:
    return [BotCredential.model_validate(b) for b in store.read(BOT_CREDENTIALS, default_for(BOT_CREDENTIALS))]


def find_bot(store: DocumentStore, bot_id: Optional[str]) -> Optional[BotCredential]:
    if not bot_id:
        return None
    return next((b for b in load_bots(store) if b.id == bot_id), None)


def find_bot_by_api_key(store: DocumentStore, api_key: Optional[str]) -> Optional[BotCredential]:
    if not api_key:
        return None
    found = None
    # compare against every key so timing does not reveal the match position
    for bot in load_bots(store):
        if keys_match(api_key, bot.api_key) and found is None:
            found = bot
    return found


def load_bindings(store: DocumentStore) -> List[GuildBinding]:
    return [GuildBinding.model_validate(g) for g in store.read(GUILD_BINDINGS, default_for(GUILD_BINDINGS))]


def find_binding(store: DocumentStore, guild_id: str) -> Optional[GuildBinding]:
    return next((g for g in load_bindings(store) if g.guild_id == guild_id), None)


def upsert_guild_binding(
    store: DocumentStore,
    *,
    guild_id: str,
    bot_id: str,
    name: Optional[str] = None,
    icon: Optional[str] = None,
) -> GuildBinding:
    """
    Insert or update the binding for guild_id.

    - absent: insert with name (or "Guild") and icon (or None)
    - present: rebind to bot_id; name/icon only change when a non-empty value is given
    - lastSeen always moves forward
    """

    def _apply(docs: list) -> GuildBinding:
        for idx, raw in enumerate(docs):
            if raw.get("guildId") != guild_id:
                continue
            binding = GuildBinding.model_validate(raw)
            binding.bot_id = bot_id
            if name:
                binding.name = name
            if icon:
                binding.icon = icon
            binding.touch()
            docs[idx] = binding.to_doc()
            return binding

        binding = GuildBinding(guild_id=guild_id, bot_id=bot_id, name=name or "Guild", icon=icon or None)
        binding.touch()
        docs.append(binding.to_doc())
        return binding

    return store.update(GUILD_BINDINGS, default_for(GUILD_BINDINGS), _apply)
