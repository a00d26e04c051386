from __future__ import annotations

from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Document(SQLModel, table=True):
    """
    One row per logical document for the table-backed store.

    Notes:
    - name is the logical document name ("users", "guild-configs", ...)
    - value holds the JSON payload as text so any JSON value round-trips unchanged
    """

    __tablename__ = "documents"

    name: str = Field(primary_key=True, max_length=64)
    value: str
    updated_at: datetime = Field(default_factory=utcnow)
