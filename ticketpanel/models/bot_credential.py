from __future__ import annotations

from typing import Any, Dict, Optional

from .base import Record

SECRET_FIELDS = ("token",)


def strip_secrets(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a stored credential dict without secret keys (the "safe view")."""
    return {k: v for k, v in doc.items() if k not in SECRET_FIELDS}


class BotCredential(Record):
    """
    This system's record for one external bot process.

    - api_key is minted at creation and authenticates the bot (x-api-key)
    - owner_user_id links the bot to the dashboard user who manages it
    - token is the external bot secret; it is stored but never returned
    """

    id: str
    name: str
    api_key: str
    owner_user_id: Optional[str] = None
    discord_app_id: Optional[str] = None
    token: Optional[str] = None

    def safe_view(self) -> "BotCredentialView":
        return BotCredentialView.model_validate(strip_secrets(self.to_doc()))


class BotCredentialView(Record):
    """
    Safe view of a bot credential. Has no token field, and extra keys named like a
    secret are dropped, so this type cannot carry one.
    """

    id: str
    name: str
    api_key: str
    owner_user_id: Optional[str] = None
    discord_app_id: Optional[str] = None

    def model_post_init(self, __context: Any) -> None:
        extra = self.__pydantic_extra__ or {}
        for key in SECRET_FIELDS:
            extra.pop(key, None)
