from __future__ import annotations

from pydantic import AliasChoices, Field

from .base import Record


class User(Record):
    """
    A dashboard user.

    Notes:
    - username uniqueness is enforced by the create route only
    - older documents stored the hash under "passHash"; it is read from either key
      and always written back as "passwordHash"
    """

    id: str
    username: str
    password_hash: str = Field(
        validation_alias=AliasChoices("passwordHash", "passHash", "password_hash"),
        serialization_alias="passwordHash",
    )
    is_admin: bool = False

    def public_view(self) -> "UserView":
        return UserView(id=self.id, username=self.username, is_admin=self.is_admin)


class UserView(Record):
    """What the API returns for a user: never the hash."""

    id: str
    username: str
    is_admin: bool = False
