from __future__ import annotations

from typing import Any, Dict

API = "/api"


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def api_key(key: str) -> Dict[str, str]:
    return {"x-api-key": key}


def find_key(obj: Any, key: str) -> bool:
    """True when `key` appears as a dict key anywhere inside obj."""
    if isinstance(obj, dict):
        return key in obj or any(find_key(v, key) for v in obj.values())
    if isinstance(obj, list):
        return any(find_key(v, key) for v in obj)
    return False
