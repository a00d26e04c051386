from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

import bcrypt
import jwt

from ..errors import Unauthenticated

# bcrypt only looks at the first 72 bytes; newer releases refuse longer input instead.
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: Any) -> bytes:
    return str(password or "").encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(password: Any, password_hash: Optional[str]) -> bool:
    """
    Salted adaptive hash comparison. Hashes written by bcryptjs ($2a$/$2b$) verify too.
    A malformed stored hash is a failed login, not a crash.
    """
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("ascii"))
    except (ValueError, UnicodeEncodeError):
        return False


def new_id() -> str:
    return str(uuid4())


def generate_api_key() -> str:
    """Opaque 32-hex-char key minted once per bot credential."""
    return secrets.token_hex(16)


def keys_match(presented: str, stored: Optional[str]) -> bool:
    if not stored:
        return False
    return secrets.compare_digest(presented.encode("utf-8"), stored.encode("utf-8"))


def encode_token(
    claims: Dict[str, Any],
    *,
    secret: str,
    algorithm: str = "HS256",
    ttl: timedelta = timedelta(days=7),
    now: Optional[datetime] = None,
) -> str:
    issued = now or datetime.now(timezone.utc)
    payload = dict(claims)
    payload["iat"] = issued
    payload["exp"] = issued + ttl
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(token: str, *, secret: str, algorithm: str = "HS256") -> Dict[str, Any]:
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise Unauthenticated("token expired") from exc
    except jwt.PyJWTError as exc:
        raise Unauthenticated("invalid token") from exc
