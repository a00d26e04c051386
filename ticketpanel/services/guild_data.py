from __future__ import annotations

from typing import Any, Dict, List

from ..models import GuildConfig, default_guild_config
from ..storage import GUILD_CONFIGS, DocumentStore, default_for


def read_roster(store: DocumentStore, doc_name: str, guild_id: str) -> List[Dict[str, Any]]:
    return store.read(doc_name, default_for(doc_name)).get(guild_id) or []


def replace_roster(store: DocumentStore, doc_name: str, guild_id: str, items: List[Dict[str, Any]]) -> None:
    """Wholesale replace of one guild's role/channel snapshot (never merged)."""

    def _set(all_rosters: Dict[str, Any]) -> None:
        all_rosters[guild_id] = list(items)

    store.update(doc_name, default_for(doc_name), _set)


def read_guild_config(store: DocumentStore, guild_id: str) -> Dict[str, Any]:
    """Stored config, or the default structure (generated, not persisted)."""
    configs = store.read(GUILD_CONFIGS, default_for(GUILD_CONFIGS))
    # a saved {} is a real config; only a missing key falls back
    return configs[guild_id] if guild_id in configs else default_guild_config()


def save_guild_config(store: DocumentStore, guild_id: str, config: GuildConfig) -> Dict[str, Any]:
    value = config.to_stored()

    def _set(configs: Dict[str, Any]) -> None:
        configs[guild_id] = value

    store.update(GUILD_CONFIGS, default_for(GUILD_CONFIGS), _set)
    return value
