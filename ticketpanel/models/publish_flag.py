from __future__ import annotations

from typing import Optional

from .base import Record


class PublishFlag(Record):
    """Pending "configuration changed, please refresh" signal for one guild."""

    requested_at: int
    by_user: Optional[str] = None
