"""
Reference consumer of the publish handshake.

Polls consume=1 for each configured guild; on a pending flag it fetches the
effective config and hands it to a callback (the real bot would rebuild its
ticket panel there). Missed polls are harmless: the flag stays pending until
the next successful consume.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional

from .api import PanelAPIError, PanelClient
from .settings import PollerSettings

logger = logging.getLogger(__name__)

OnPublish = Callable[[str, Dict[str, Any], Dict[str, Any]], Awaitable[None]]


async def _log_publish(guild_id: str, info: Dict[str, Any], config: Dict[str, Any]) -> None:
    title = (config.get("panel") or {}).get("title")
    logger.info("Publish received guild=%s by=%s panel_title=%r", guild_id, info.get("byUser"), title)


async def poll_once(panel: PanelClient, guild_ids: Iterable[str], on_publish: OnPublish = _log_publish) -> int:
    """
    One pass over every guild. Returns how many publish signals were consumed.
    Errors for one guild are logged and do not stop the pass.
    """
    handled = 0
    for guild_id in guild_ids:
        try:
            state = await panel.poll_publish(guild_id, consume=True)
            if not state.get("pending"):
                continue
            config = await panel.fetch_config(guild_id)
        except PanelAPIError as e:
            logger.warning("Publish poll failed guild=%s: %s", guild_id, e)
            continue
        await on_publish(guild_id, state.get("info") or {}, config)
        handled += 1
    return handled


async def run_poller_loop(
    settings: PollerSettings,
    *,
    on_publish: OnPublish = _log_publish,
    stop: Optional[asyncio.Event] = None,
    client: Optional[PanelClient] = None,
) -> None:
    stop = stop or asyncio.Event()
    panel = client or PanelClient(
        settings.api_base,
        settings.api_key,
        timeout=settings.http_timeout_s,
        user_agent=settings.http_user_agent,
    )
    try:
        for guild_id in settings.guild_ids:
            try:
                await panel.register(guild_id)
            except PanelAPIError as e:
                logger.warning("Guild register failed guild=%s: %s", guild_id, e)

        logger.info("Polling %d guild(s) every %.1fs", len(settings.guild_ids), settings.poll_interval_s)
        while not stop.is_set():
            await poll_once(panel, settings.guild_ids, on_publish)
            try:
                await asyncio.wait_for(stop.wait(), timeout=settings.poll_interval_s)
            except asyncio.TimeoutError:
                pass
    finally:
        if client is None:
            await panel.aclose()


def run_poller() -> None:
    settings = PollerSettings()
    settings.validate()
    logging.basicConfig(level=logging.INFO)
    asyncio.run(run_poller_loop(settings))
