from __future__ import annotations

from typing import Optional

from .base import Record, now_ms


class GuildBinding(Record):
    """
    Binds an external guild id to the bot credential that serves it.
    Upserted by guild_id; last_seen is epoch ms.
    """

    guild_id: str
    bot_id: str
    name: str = "Guild"
    icon: Optional[str] = None
    last_seen: int = 0

    def touch(self) -> None:
        # Strictly increasing even when two upserts land in the same millisecond.
        self.last_seen = max(now_ms(), self.last_seen + 1)
