"""
Document storage.

Every persisted collection is one logical document; these names and their empty
defaults are the single source of truth for both backends.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Optional

from ..config import Settings
from .base import DocumentStore, check_document_name
from .file_store import FileDocumentStore
from .table_store import TableDocumentStore

USERS = "users"  # [User]
BOT_CREDENTIALS = "bot-credentials"  # [BotCredential]
GUILD_BINDINGS = "guild-bindings"  # [GuildBinding]
GUILD_ROLES = "guild-roles"  # {guildId: [role]}
GUILD_CHANNELS = "guild-channels"  # {guildId: [channel]}
GUILD_CONFIGS = "guild-configs"  # {guildId: GuildConfig}
PUBLISH_FLAGS = "publish-flags"  # {guildId: PublishFlag}

DOCUMENT_DEFAULTS: Dict[str, Any] = {
    USERS: [],
    BOT_CREDENTIALS: [],
    GUILD_BINDINGS: [],
    GUILD_ROLES: {},
    GUILD_CHANNELS: {},
    GUILD_CONFIGS: {},
    PUBLISH_FLAGS: {},
}


def default_for(name: str) -> Any:
    """Fresh copy of a known document's empty value."""
    return copy.deepcopy(DOCUMENT_DEFAULTS[name])


def build_store(settings: Settings, *, database_url: Optional[str] = None) -> DocumentStore:
    if settings.storage_backend == "table":
        return TableDocumentStore(database_url=database_url or settings.resolved_database_url)
    return FileDocumentStore(settings.data_dir)


__all__ = [
    "DocumentStore",
    "FileDocumentStore",
    "TableDocumentStore",
    "check_document_name",
    "build_store",
    "default_for",
    "DOCUMENT_DEFAULTS",
    "USERS",
    "BOT_CREDENTIALS",
    "GUILD_BINDINGS",
    "GUILD_ROLES",
    "GUILD_CHANNELS",
    "GUILD_CONFIGS",
    "PUBLISH_FLAGS",
]
