"""
Bot-side HTTP client for the panel backend.

Keep this package dependency-light (httpx only, no discord import) so any bot
process can embed it.
"""

from .api import PanelAPIError, PanelClient, api_request
from .poller import poll_once, run_poller, run_poller_loop
from .settings import PollerSettings

__all__ = [
    "PanelAPIError",
    "PanelClient",
    "api_request",
    "poll_once",
    "run_poller",
    "run_poller_loop",
    "PollerSettings",
]
