from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import Field as PydField

from ..config import Settings
from ..errors import InvalidInput, NotFound
from ..models import Payload, User
from ..services.directory import load_users
from ..services.security import hash_password, new_id
from ..storage import USERS, DocumentStore, default_for
from .deps import get_settings, get_store, require_admin

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_admin)])


# -----------------------------
# Schemas
# -----------------------------

class UserCreate(Payload):
    username: str = PydField(..., min_length=1)
    password: str = PydField(..., min_length=1)
    is_admin: bool = False


class UserUpdate(Payload):
    """
    Partial update. Any field omitted is left unchanged.
    """
    username: Optional[str] = None
    password: Optional[str] = None
    is_admin: Optional[bool] = None


# -----------------------------
# Routes
# -----------------------------

@router.get("")
def list_users(store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    return {"users": [u.public_view().to_doc() for u in load_users(store)]}


@router.post("")
def create_user(
    payload: UserCreate,
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """
    Create a dashboard user. Usernames must be unique at creation time.
    """
    username = payload.username.strip()
    if not username:
        raise InvalidInput("username and password required")

    user = User(
        id=new_id(),
        username=username,
        password_hash=hash_password(payload.password, rounds=settings.bcrypt_rounds),
        is_admin=payload.is_admin,
    )

    def _add(users: list) -> None:
        if any(u.get("username") == username for u in users):
            raise InvalidInput("user already exists")
        users.append(user.to_doc())

    store.update(USERS, default_for(USERS), _add)
    return {"ok": True, "user": user.public_view().to_doc()}


@router.put("/{user_id}")
def update_user(
    user_id: str,
    payload: UserUpdate,
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    # hash outside the document lock; bcrypt is slow on purpose
    new_hash = hash_password(payload.password, rounds=settings.bcrypt_rounds) if payload.password else None

    def _apply(users: list) -> User:
        for idx, raw in enumerate(users):
            if raw.get("id") != user_id:
                continue
            user = User.model_validate(raw)
            if payload.username is not None and payload.username.strip():
                user.username = payload.username.strip()
            if payload.is_admin is not None:
                user.is_admin = payload.is_admin
            if new_hash:
                user.password_hash = new_hash
            users[idx] = user.to_doc()
            return user
        raise NotFound("not found: user")

    user = store.update(USERS, default_for(USERS), _apply)
    return {"ok": True, "user": user.public_view().to_doc()}


@router.delete("/{user_id}")
def delete_user(user_id: str, store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    """
    Bots owned by the removed user keep their ownerUserId; it simply stops matching anyone.
    """

    def _remove(users: list) -> None:
        for idx, raw in enumerate(users):
            if raw.get("id") == user_id:
                del users[idx]
                return
        raise NotFound("not found: user")

    store.update(USERS, default_for(USERS), _remove)
    return {"ok": True}
