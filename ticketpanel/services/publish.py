from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..models import PublishFlag, now_ms
from ..storage import PUBLISH_FLAGS, DocumentStore, default_for

logger = logging.getLogger(__name__)


class PublishCoordinator:
    """
    Per-guild single-slot publish mailbox, kept in the publish-flags document.

    States per guild: empty | pending.
    - request: store {requestedAt, byUser}; a pending flag is overwritten (last request wins)
    - peek: report state and stored value, no transition
    - consume: pending -> empty returning the stored value; empty stays empty, nothing written

    Polling only: the panel requests, the bot peeks/consumes on its own schedule.
    """

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def _flags(self) -> Dict[str, Any]:
        return self.store.read(PUBLISH_FLAGS, default_for(PUBLISH_FLAGS))

    def request(self, guild_id: str, by_user: Optional[str]) -> PublishFlag:
        flag = PublishFlag(requested_at=now_ms(), by_user=by_user or None)

        def _set(flags: Dict[str, Any]) -> None:
            flags[guild_id] = flag.to_doc()

        self.store.update(PUBLISH_FLAGS, default_for(PUBLISH_FLAGS), _set)
        logger.info("Publish requested guild=%s by=%s", guild_id, flag.by_user)
        return flag

    def peek(self, guild_id: str) -> Dict[str, Any]:
        info = self._flags().get(guild_id) or None
        return {"pending": info is not None, "info": info}

    def consume(self, guild_id: str) -> Dict[str, Any]:
        with self.store.lock(PUBLISH_FLAGS):
            flags = self._flags()
            info = flags.pop(guild_id, None)
            if not info:
                return {"pending": False}
            self.store.write(PUBLISH_FLAGS, flags)
        logger.info("Publish consumed guild=%s", guild_id)
        return {"pending": True, "info": info}
