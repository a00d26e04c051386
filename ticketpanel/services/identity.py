from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Optional

from ..config import Settings
from ..errors import Unauthenticated
from ..models import BotCredential, Record
from ..storage import DocumentStore
from .directory import find_bot_by_api_key, find_user_by_username
from .security import decode_token, encode_token, keys_match, verify_password

logger = logging.getLogger(__name__)

ADMIN_SUBJECT_ID = "admin"
BAD_LOGIN = "invalid username or password"


class SessionClaims(Record):
    """Who a session token speaks for."""

    subject_id: str
    username: str
    is_admin: bool = False


def issue_session_token(claims: SessionClaims, settings: Settings) -> str:
    return encode_token(
        {"sub": claims.subject_id, "username": claims.username, "isAdmin": claims.is_admin},
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(days=settings.session_ttl_days),
    )


def login_admin(settings: Settings, username: Any, password: Any) -> str:
    """
    Bootstrap admin login: exact match against the configured pair.

    The configured admin is not a stored User, so there is no hash to check here;
    the seeded admin User (see seed.py) is what the user login path verifies.
    """
    if not isinstance(username, str) or not isinstance(password, str):
        raise Unauthenticated(BAD_LOGIN)
    if not (keys_match(username, settings.admin_user) and keys_match(password, settings.admin_pass)):
        logger.info("Admin login rejected for username=%r", username)
        raise Unauthenticated(BAD_LOGIN)
    claims = SessionClaims(subject_id=ADMIN_SUBJECT_ID, username=username, is_admin=True)
    return issue_session_token(claims, settings)


def login_user(store: DocumentStore, settings: Settings, username: Any, password: Any) -> str:
    user = find_user_by_username(store, username)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("User login rejected for username=%r", username)
        raise Unauthenticated(BAD_LOGIN)
    claims = SessionClaims(subject_id=user.id, username=user.username, is_admin=user.is_admin)
    return issue_session_token(claims, settings)


def bearer_token(authorization: Optional[str]) -> str:
    header = (authorization or "").strip()
    if not header.startswith("Bearer "):
        raise Unauthenticated("no token")
    token = header[len("Bearer "):].strip()
    if not token:
        raise Unauthenticated("no token")
    return token


def authenticate_session(settings: Settings, authorization: Optional[str]) -> SessionClaims:
    """Valid, unexpired, correctly signed bearer token -> claims; anything else -> Unauthenticated."""
    payload = decode_token(
        bearer_token(authorization),
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    username = payload.get("username")
    if not isinstance(username, str):
        raise Unauthenticated("invalid token")
    return SessionClaims(
        subject_id=str(payload["sub"]),
        username=username,
        is_admin=payload.get("isAdmin") is True,
    )


def authenticate_bot(store: DocumentStore, api_key: Optional[str]) -> BotCredential:
    if not api_key:
        raise Unauthenticated("x-api-key required")
    bot = find_bot_by_api_key(store, api_key)
    if bot is None:
        raise Unauthenticated("invalid api key")
    return bot
