from __future__ import annotations

from typing import Any, Dict, Optional


class PanelError(Exception):
    """
    Base for every failure the service reports to callers.

    Services raise these without knowing about HTTP; the app factory maps
    them to status codes and a {"detail": ...} envelope.
    """

    status_code: int = 500
    default_detail: str = "internal error"

    def __init__(self, detail: Optional[str] = None, *, extra: Optional[Dict[str, Any]] = None) -> None:
        self.detail = detail or self.default_detail
        self.extra = extra or {}
        super().__init__(self.detail)

    def to_payload(self) -> Dict[str, Any]:
        return {"detail": self.detail, **self.extra}


class Unauthenticated(PanelError):
    """Missing/invalid/expired session token, unknown API key, bad login."""

    status_code = 401
    default_detail = "unauthenticated"


class Forbidden(PanelError):
    """Valid identity, insufficient privilege or not the owner."""

    status_code = 403
    default_detail = "forbidden"


class NotFound(PanelError):
    status_code = 404
    default_detail = "not found"


class InvalidInput(PanelError):
    status_code = 400
    default_detail = "invalid input"


class StorageError(PanelError):
    """
    Backend read/write failure. Rendered to callers as a generic internal error;
    the cause is only logged.
    """

    status_code = 500
    default_detail = "internal error"


__all__ = [
    "PanelError",
    "Unauthenticated",
    "Forbidden",
    "NotFound",
    "InvalidInput",
    "StorageError",
]
