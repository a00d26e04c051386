from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends

from ..config import Settings
from ..models import Payload
from ..services import login_admin, login_user
from ..storage import DocumentStore
from .deps import get_settings, get_store

router = APIRouter(prefix="/sessions", tags=["sessions"])


class LoginRequest(Payload):
    username: str = ""
    password: str = ""


@router.post("/admin")
def create_admin_session(
    payload: Optional[LoginRequest] = None,
    settings: Settings = Depends(get_settings),
) -> Dict[str, str]:
    """
    Bootstrap admin login (configured ADMIN_USER / ADMIN_PASS, exact match).
    """
    payload = payload or LoginRequest()
    return {"token": login_admin(settings, payload.username, payload.password)}


@router.post("/user")
def create_user_session(
    payload: Optional[LoginRequest] = None,
    settings: Settings = Depends(get_settings),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, str]:
    """
    Stored-user login, password checked against the bcrypt hash.
    """
    payload = payload or LoginRequest()
    return {"token": login_user(store, settings, payload.username, payload.password)}
